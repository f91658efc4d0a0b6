"""Lessons, quizzes and per-user learning progress.

Quizzes carry no rewards. Passing one marks the lesson completed; a later
failed attempt updates the score but never takes the completion back.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ecoquest.core.errors import AnswerCountMismatch, LessonAlreadyCompleted, LessonNotFound, QuizNotFound
from ecoquest.core.game_rules import QUIZ_PASS_SCORE
from ecoquest.models.learning import LearningProgress, Lesson, QuizQuestion
from ecoquest.services.progression import round_half_up

logger = logging.getLogger(__name__)


@dataclass
class QuestionResult:
    question_id: uuid.UUID
    is_correct: bool
    correct_answer: int
    explanation: str | None


@dataclass
class QuizResult:
    score: int
    passed: bool
    progress: LearningProgress
    results: list[QuestionResult] = field(default_factory=list)


def _active_lesson(db: Session, lesson_id: uuid.UUID) -> Lesson:
    lesson = db.get(Lesson, lesson_id)
    if not lesson or not lesson.is_active:
        raise LessonNotFound()
    return lesson


def _get_progress(db: Session, user_id: uuid.UUID, lesson_id: uuid.UUID) -> LearningProgress | None:
    return db.execute(
        select(LearningProgress).where(
            LearningProgress.user_id == user_id,
            LearningProgress.lesson_id == lesson_id,
        )
    ).scalar_one_or_none()


def _get_or_create_progress(db: Session, user_id: uuid.UUID, lesson_id: uuid.UUID) -> LearningProgress:
    progress = _get_progress(db, user_id, lesson_id)
    if progress:
        return progress

    progress = LearningProgress(user_id=user_id, lesson_id=lesson_id, completed=False, quiz_attempts=0)
    db.add(progress)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = _get_progress(db, user_id, lesson_id)
        if existing:
            return existing
        raise
    db.refresh(progress)
    return progress


def _questions(db: Session, lesson_id: uuid.UUID) -> list[QuizQuestion]:
    return list(
        db.execute(
            select(QuizQuestion)
            .where(QuizQuestion.lesson_id == lesson_id)
            .order_by(QuizQuestion.order, QuizQuestion.id)
        ).scalars()
    )


def list_lessons(db: Session, user_id: uuid.UUID) -> list[tuple[Lesson, LearningProgress | None]]:
    """Active lessons in order, each paired with the user's progress row if any."""
    lessons = db.execute(
        select(Lesson).where(Lesson.is_active.is_(True)).order_by(Lesson.order, Lesson.title)
    ).scalars().all()
    rows = db.execute(select(LearningProgress).where(LearningProgress.user_id == user_id)).scalars().all()
    by_lesson = {row.lesson_id: row for row in rows}
    return [(lesson, by_lesson.get(lesson.id)) for lesson in lessons]


def get_lesson(db: Session, user_id: uuid.UUID, lesson_id: uuid.UUID) -> tuple[Lesson, LearningProgress | None]:
    lesson = _active_lesson(db, lesson_id)
    return lesson, _get_progress(db, user_id, lesson_id)


def complete_lesson(db: Session, user_id: uuid.UUID, lesson_id: uuid.UUID) -> LearningProgress:
    _active_lesson(db, lesson_id)
    progress = _get_or_create_progress(db, user_id, lesson_id)
    if progress.completed:
        raise LessonAlreadyCompleted()

    progress.completed = True
    progress.completed_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(progress)
    logger.info("lesson_completed user_id=%s lesson_id=%s", user_id, lesson_id)
    return progress


def get_quiz(db: Session, lesson_id: uuid.UUID) -> list[QuizQuestion]:
    questions = _questions(db, lesson_id)
    if not questions:
        raise QuizNotFound()
    return questions


def submit_quiz(db: Session, user_id: uuid.UUID, lesson_id: uuid.UUID, answers: list[int]) -> QuizResult:
    """Grade ``answers`` positionally against the lesson's questions and record the attempt."""
    questions = get_quiz(db, lesson_id)
    if len(answers) != len(questions):
        raise AnswerCountMismatch()

    results = [
        QuestionResult(
            question_id=q.id,
            is_correct=answer == q.correct_answer,
            correct_answer=q.correct_answer,
            explanation=q.explanation,
        )
        for q, answer in zip(questions, answers)
    ]
    correct = sum(1 for r in results if r.is_correct)
    score = round_half_up(100 * correct / len(questions))
    passed = score >= QUIZ_PASS_SCORE

    progress = _get_or_create_progress(db, user_id, lesson_id)
    progress.quiz_score = score
    # Counted in SQL so concurrent submissions are all recorded.
    progress.quiz_attempts = LearningProgress.quiz_attempts + 1
    if passed and not progress.completed:
        progress.completed = True
        progress.completed_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(progress)

    logger.info(
        "quiz_submitted user_id=%s lesson_id=%s score=%s passed=%s attempts=%s",
        user_id,
        lesson_id,
        score,
        passed,
        progress.quiz_attempts,
    )
    return QuizResult(score=score, passed=passed, progress=progress, results=results)


def learning_summary(db: Session, user_id: uuid.UUID) -> dict[str, Any]:
    """Completion across active lessons and the mean score of quizzes actually attempted."""
    total = db.execute(select(func.count(Lesson.id)).where(Lesson.is_active.is_(True))).scalar_one()
    rows = db.execute(
        select(LearningProgress)
        .join(Lesson, Lesson.id == LearningProgress.lesson_id)
        .where(LearningProgress.user_id == user_id, Lesson.is_active.is_(True))
    ).scalars().all()

    completed = sum(1 for row in rows if row.completed)
    scores = [row.quiz_score for row in rows if row.quiz_score is not None]
    return {
        "completed_lessons": completed,
        "total_lessons": total,
        "completion_percent": round_half_up(100 * completed / total) if total else 0,
        "average_quiz_score": round_half_up(sum(scores) / len(scores)) if scores else 0,
    }
