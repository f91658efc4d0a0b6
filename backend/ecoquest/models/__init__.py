"""SQLAlchemy models."""

from __future__ import annotations

from ecoquest.models.badge import Badge, UserBadge
from ecoquest.models.learning import LearningProgress, Lesson, QuizQuestion
from ecoquest.models.map_region import MapRegion
from ecoquest.models.mission import Mission
from ecoquest.models.mission_progress import MissionProgress
from ecoquest.models.proof import Proof
from ecoquest.models.reward import Reward
from ecoquest.models.user import User

__all__ = [
    "User",
    "Badge",
    "LearningProgress",
    "Lesson",
    "MapRegion",
    "Mission",
    "MissionProgress",
    "Proof",
    "QuizQuestion",
    "Reward",
    "UserBadge",
]
