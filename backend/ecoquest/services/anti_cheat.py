"""Proof legitimacy scoring.

Placeholder heuristic: a fixed average of simple file checks, no learned model.
Scores near 1.0 look legitimate, near 0.0 suspicious.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

from ecoquest.core.game_rules import (
    PHOTO_CONTENT_TYPES,
    PHOTO_MAX_BYTES,
    PHOTO_MIN_BYTES,
    PROOF_APPROVE_AT,
    PROOF_MAX_AGE_HOURS,
    PROOF_REJECT_BELOW,
    VIDEO_CONTENT_TYPES,
    VIDEO_MAX_BYTES,
    VIDEO_MIN_BYTES,
)

# Stand-in score for image/video analysis that does not exist yet.
ADVANCED_ANALYSIS_SCORE = 0.8


@dataclass
class AntiCheatCheck:
    name: str
    passed: bool
    score: float
    message: str | None = None


@dataclass
class AntiCheatResult:
    score: float
    checks: list[AntiCheatCheck]

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "checks": [asdict(c) for c in self.checks]}


def _size_check(proof_type: str, size: int) -> AntiCheatCheck:
    if proof_type == "photo":
        min_size, max_size = PHOTO_MIN_BYTES, PHOTO_MAX_BYTES
    else:
        min_size, max_size = VIDEO_MIN_BYTES, VIDEO_MAX_BYTES
    passed = min_size <= size <= max_size
    if size < min_size:
        message = "File too small"
    elif size > max_size:
        message = "File too large"
    else:
        message = "File size valid"
    return AntiCheatCheck(name="file_size", passed=passed, score=1.0 if passed else 0.0, message=message)


def _content_type_check(proof_type: str, content_type: str) -> AntiCheatCheck:
    expected = PHOTO_CONTENT_TYPES if proof_type == "photo" else VIDEO_CONTENT_TYPES
    passed = any(t in content_type.lower() for t in expected)
    return AntiCheatCheck(
        name="content_type",
        passed=passed,
        score=1.0 if passed else 0.0,
        message=f"Expected {proof_type} but got {content_type}",
    )


def _age_check(created: datetime, now: datetime) -> AntiCheatCheck:
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    age_hours = (now - created).total_seconds() / 3600
    passed = age_hours <= PROOF_MAX_AGE_HOURS
    # Old files are only mildly suspicious.
    return AntiCheatCheck(
        name="file_age",
        passed=passed,
        score=1.0 if passed else 0.5,
        message=f"File created {round(age_hours)} hours ago",
    )


def score(proof_type: str, metadata: dict[str, Any] | None, now: datetime | None = None) -> AntiCheatResult:
    """Score file metadata (``size``, ``content_type``, optional ``time_created``)."""
    metadata = metadata or {}
    now = now or datetime.now(timezone.utc)

    checks = [
        _size_check(proof_type, int(metadata.get("size") or 0)),
        _content_type_check(proof_type, str(metadata.get("content_type") or "")),
    ]
    created = metadata.get("time_created")
    if created:
        if isinstance(created, str):
            created = datetime.fromisoformat(created)
        checks.append(_age_check(created, now))
    checks.append(
        AntiCheatCheck(
            name="advanced_analysis",
            passed=True,
            score=ADVANCED_ANALYSIS_SCORE,
            message="Advanced analysis not implemented (placeholder)",
        )
    )

    overall = sum(c.score for c in checks) / len(checks)
    return AntiCheatResult(score=round(overall, 2), checks=checks)


def classify(value: float) -> str:
    if value >= PROOF_APPROVE_AT:
        return "APPROVED"
    if value < PROOF_REJECT_BELOW:
        return "REJECTED"
    return "PENDING"
