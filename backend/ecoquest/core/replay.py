"""Nonce and timestamp guard against replayed state-changing requests."""

import logging
import threading
import time
from typing import Annotated

from fastapi import Header, Request

from ecoquest.core.config import settings
from ecoquest.core.errors import MissingReplayHeaders, ReplayedRequest
from ecoquest.core.game_rules import (
    REPLAY_FUTURE_SKEW_SECONDS,
    REPLAY_MAX_AGE_SECONDS,
    REPLAY_SWEEP_ABOVE,
)

logger = logging.getLogger(__name__)

GUARDED_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def _now_ms() -> int:
    return int(time.time() * 1000)


class NonceRegistry:
    """Nonces seen in the last few minutes, in process memory.

    Each worker keeps its own registry, so a multi-process deployment only
    catches replays that land on the same worker.
    """

    def __init__(
        self,
        max_age_seconds: int = REPLAY_MAX_AGE_SECONDS,
        future_skew_seconds: int = REPLAY_FUTURE_SKEW_SECONDS,
        sweep_above: int = REPLAY_SWEEP_ABOVE,
    ) -> None:
        self.max_age_ms = max_age_seconds * 1000
        self.future_skew_ms = future_skew_seconds * 1000
        self.sweep_above = sweep_above
        # nonce -> server time it was first accepted
        self._seen: dict[str, int] = {}
        self._lock = threading.Lock()

    def accept(self, nonce: str, timestamp_ms: int, now_ms: int | None = None) -> bool:
        """Record ``nonce`` and return True, or False for a reuse or a stale/future timestamp."""
        now_ms = _now_ms() if now_ms is None else now_ms
        with self._lock:
            if nonce in self._seen:
                return False
            if now_ms - timestamp_ms > self.max_age_ms:
                return False
            if timestamp_ms > now_ms + self.future_skew_ms:
                return False
            self._seen[nonce] = now_ms
            if len(self._seen) > self.sweep_above:
                self._sweep(now_ms)
        return True

    def _sweep(self, now_ms: int) -> None:
        cutoff = now_ms - self.max_age_ms
        for key in [k for k, seen in self._seen.items() if seen < cutoff]:
            del self._seen[key]

    def clear(self) -> None:
        with self._lock:
            self._seen.clear()

    def __len__(self) -> int:
        return len(self._seen)


nonce_registry = NonceRegistry()


def _parse_timestamp(raw: str | None) -> int | None:
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value or None


def require_fresh_request(
    request: Request,
    x_nonce: Annotated[str | None, Header()] = None,
    x_timestamp: Annotated[str | None, Header()] = None,
) -> None:
    """App-wide dependency: state-changing requests carry a unique X-Nonce and a recent X-Timestamp (ms)."""
    if not settings.replay_protection or request.method not in GUARDED_METHODS:
        return
    timestamp = _parse_timestamp(x_timestamp)
    if not x_nonce or timestamp is None:
        raise MissingReplayHeaders()
    if not nonce_registry.accept(x_nonce, timestamp):
        logger.warning("request_replay_rejected method=%s path=%s", request.method, request.url.path)
        raise ReplayedRequest()
