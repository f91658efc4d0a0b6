"""Follow-on effects with independent failure isolation.

An action that has already committed its primary state change queues its
secondary effects here. Each effect runs on its own; a failure is rolled back,
logged under the effect's name and recorded, and the next effect still runs.
Failed effects are not retried.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@dataclass
class Effect:
    name: str
    run: Callable[[], Any]


@dataclass
class EffectOutcome:
    name: str
    ok: bool
    error: str | None = None


@dataclass
class EffectList:
    """Ordered effects for one action. ``context`` is attached to every log line."""

    db: Session
    context: dict[str, Any] = field(default_factory=dict)
    effects: list[Effect] = field(default_factory=list)

    def add(self, name: str, run: Callable[[], Any]) -> None:
        self.effects.append(Effect(name=name, run=run))

    def run_all(self) -> list[EffectOutcome]:
        outcomes: list[EffectOutcome] = []
        ctx = " ".join(f"{k}={v}" for k, v in self.context.items())
        for effect in self.effects:
            try:
                effect.run()
            except Exception as exc:  # noqa: BLE001
                self.db.rollback()
                logger.exception("effect_failed effect=%s %s", effect.name, ctx)
                outcomes.append(EffectOutcome(name=effect.name, ok=False, error=str(exc)))
                continue
            logger.debug("effect_applied effect=%s %s", effect.name, ctx)
            outcomes.append(EffectOutcome(name=effect.name, ok=True))
        return outcomes
