"""Starter catalog of missions, badges and lessons, seeded at startup when enabled."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ecoquest.models.badge import Badge
from ecoquest.models.learning import Lesson, QuizQuestion
from ecoquest.models.mission import Mission

logger = logging.getLogger(__name__)

_BADGE_CATALOG: list[dict[str, Any]] = [
    {"code": "first_mission", "name": "First Steps", "icon": "🌱",
     "requirement_type": "mission_complete", "requirement_value": 1, "reward_amount": 25,
     "description": "Completed your first mission."},
    {"code": "five_missions", "name": "Steady Guardian", "icon": "🛡️",
     "requirement_type": "mission_complete", "requirement_value": 5, "reward_amount": 75,
     "description": "Completed five missions."},
    {"code": "xp_500", "name": "Seasoned", "icon": "⭐",
     "requirement_type": "xp_reached", "requirement_value": 500, "reward_amount": 50,
     "description": "Earned 500 XP."},
    {"code": "level_5", "name": "Rising Hero", "icon": "🏅",
     "requirement_type": "level_reached", "requirement_value": 5, "reward_amount": 100,
     "description": "Reached level 5."},
    {"code": "purifier", "name": "Purifier", "icon": "💧",
     "requirement_type": "corruption_cleared", "requirement_value": 100, "reward_amount": 150,
     "description": "Cleared 100 points of corruption."},
    {"code": "eco_karma_50", "name": "Friend of the Earth", "icon": "🌍",
     "requirement_type": "eco_karma", "requirement_value": 50, "reward_amount": 0,
     "description": "Accrued 50 eco-karma."},
]

_MISSION_CATALOG: list[dict[str, Any]] = [
    {"title": "Plant a Seedling", "description": "Plant a tree or seedling and photograph it.",
     "type": "photo", "category": "restoration", "god": "artemis", "region": "forest_restoration",
     "reward_amount": 200, "corruption_level": 20, "is_corruption_mission": True},
    {"title": "Riverbank Sweep", "description": "Collect litter along a river or stream.",
     "type": "photo", "category": "cleanup", "god": "persephone", "region": "river_cleanup",
     "reward_amount": 200, "corruption_level": 20, "is_corruption_mission": True},
    {"title": "Street Cleanup", "description": "Pick up litter on your street.",
     "type": "photo", "category": "cleanup", "god": "zeus", "region": "urban_pollution",
     "reward_amount": 150, "corruption_level": 15, "is_corruption_mission": True},
    {"title": "Learn to Sort Waste", "description": "Set up separate bins for recycling at home.",
     "type": "action", "category": "learning", "god": "athena", "reward_amount": 100},
    {"title": "Guardian of the Grove", "description": "A trial for those who have cleansed the land.",
     "type": "video", "category": "trial", "god": "artemis", "region": "forest_restoration",
     "reward_amount": 500, "corruption_level": 40, "is_corruption_mission": True,
     "requires_corruption_cleared": True},
]

_LESSON_CATALOG: list[dict[str, Any]] = [
    {
        "title": "Why Forests Matter", "god": "artemis", "order": 1,
        "description": "How trees clean air, hold soil and shelter wildlife.",
        "content": "A single mature tree absorbs roughly 20 kg of CO2 a year. Roots bind soil "
                   "against erosion, and canopies shelter most land-dwelling species.",
        "questions": [
            {"question": "Roughly how much CO2 does a mature tree absorb per year?",
             "options": ["2 kg", "20 kg", "200 kg", "2 tonnes"], "correct_answer": 1,
             "explanation": "Estimates cluster around 20 kg per year."},
            {"question": "What do tree roots protect against?",
             "options": ["Erosion", "Lightning", "Drought", "Frost"], "correct_answer": 0,
             "explanation": "Roots bind soil in place."},
        ],
    },
    {
        "title": "Sorting Your Waste", "god": "athena", "order": 2,
        "description": "Recycling streams and what contaminates them.",
        "content": "Food residue and mixed materials are the most common reasons a recycling "
                   "batch is rejected. Rinse containers and separate paper, glass and plastics.",
        "questions": [
            {"question": "What most often gets a recycling batch rejected?",
             "options": ["Clean glass", "Food residue", "Flattened cardboard"], "correct_answer": 1,
             "explanation": "Contamination from food spoils whole batches."},
            {"question": "Should containers be rinsed before recycling?",
             "options": ["Yes", "No"], "correct_answer": 0,
             "explanation": None},
            {"question": "Which of these belongs with paper?",
             "options": ["Greasy pizza box", "Newspaper", "Plastic bag"], "correct_answer": 1,
             "explanation": "Greasy cardboard is contaminated; plastic bags jam sorting machines."},
        ],
    },
]

# Title of the mission each entry waits for.
_MISSION_PREREQUISITES = {"Riverbank Sweep": "Plant a Seedling"}


def seed_catalog(db: Session) -> None:
    """Insert catalog entries that do not exist yet. Existing rows are left alone."""
    for data in _BADGE_CATALOG:
        if db.execute(select(Badge.id).where(Badge.code == data["code"])).scalar_one_or_none() is None:
            db.add(Badge(**data))
            logger.info("catalog_badge_created code=%s", data["code"])

    for data in _MISSION_CATALOG:
        if db.execute(select(Mission.id).where(Mission.title == data["title"])).scalar_one_or_none() is None:
            db.add(Mission(**data))
            logger.info("catalog_mission_created title=%s", data["title"])
    db.flush()

    for title, prerequisite in _MISSION_PREREQUISITES.items():
        mission = db.execute(select(Mission).where(Mission.title == title)).scalar_one()
        required = db.execute(select(Mission.id).where(Mission.title == prerequisite)).scalar_one()
        if mission.unlocks_after_mission_id is None:
            mission.unlocks_after_mission_id = required

    for data in _LESSON_CATALOG:
        if db.execute(select(Lesson.id).where(Lesson.title == data["title"])).scalar_one_or_none() is not None:
            continue
        questions = data["questions"]
        lesson = Lesson(**{k: v for k, v in data.items() if k != "questions"})
        db.add(lesson)
        db.flush()
        for order, question in enumerate(questions, start=1):
            db.add(QuizQuestion(lesson_id=lesson.id, order=order, **question))
        logger.info("catalog_lesson_created title=%s questions=%s", data["title"], len(questions))
    db.commit()
