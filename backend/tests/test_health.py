"""Health endpoint and error envelope tests."""


def test_health_returns_ok(client):
    """GET /health is a bare liveness payload, not wrapped in the envelope."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_route_uses_error_envelope(client):
    """Routing 404s are rendered as { success: false, error }."""
    response = client.get("/no-such-route")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]
