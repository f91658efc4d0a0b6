"""Lessons and quizzes API."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ecoquest.core.deps import get_current_user
from ecoquest.db.session import get_db
from ecoquest.models.user import User
from ecoquest.schemas.envelope import ApiResponse
from ecoquest.schemas.learning import (
    LearningSummaryOut,
    LessonOut,
    LessonProgressOut,
    LessonSummaryOut,
    QuestionResultOut,
    QuizOut,
    QuizQuestionOut,
    QuizResultOut,
    QuizSubmitRequest,
)
from ecoquest.services import learning_service

router = APIRouter(prefix="/learning", tags=["learning"])


@router.get("/lessons", response_model=ApiResponse[list[LessonSummaryOut]])
def lessons(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows = learning_service.list_lessons(db, current_user.id)
    return ApiResponse(
        data=[
            LessonSummaryOut(
                id=lesson.id,
                title=lesson.title,
                description=lesson.description,
                god=lesson.god,
                order=lesson.order,
                completed=bool(progress and progress.completed),
                quiz_score=progress.quiz_score if progress else None,
                quiz_attempts=progress.quiz_attempts if progress else 0,
            )
            for lesson, progress in rows
        ]
    )


@router.get("/lessons/{lesson_id}", response_model=ApiResponse[LessonOut])
def lesson(
    lesson_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    row, progress = learning_service.get_lesson(db, current_user.id, lesson_id)
    return ApiResponse(
        data=LessonOut(
            id=row.id,
            title=row.title,
            description=row.description,
            content=row.content,
            god=row.god,
            order=row.order,
            progress=LessonProgressOut.model_validate(progress) if progress else None,
        )
    )


@router.post("/lessons/{lesson_id}/complete", response_model=ApiResponse[LessonProgressOut])
def complete(
    lesson_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    progress = learning_service.complete_lesson(db, current_user.id, lesson_id)
    return ApiResponse(data=LessonProgressOut.model_validate(progress))


@router.get("/quizzes/{lesson_id}", response_model=ApiResponse[QuizOut])
def quiz(
    lesson_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    questions = learning_service.get_quiz(db, lesson_id)
    return ApiResponse(
        data=QuizOut(lesson_id=lesson_id, questions=[QuizQuestionOut.model_validate(q) for q in questions])
    )


@router.post("/quizzes/{lesson_id}/submit", response_model=ApiResponse[QuizResultOut])
def submit(
    lesson_id: uuid.UUID,
    data: QuizSubmitRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = learning_service.submit_quiz(db, current_user.id, lesson_id, data.answers)
    return ApiResponse(
        data=QuizResultOut(
            score=result.score,
            passed=result.passed,
            quiz_attempts=result.progress.quiz_attempts,
            results=[QuestionResultOut.model_validate(r) for r in result.results],
        )
    )


@router.get("/progress", response_model=ApiResponse[LearningSummaryOut])
def progress(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ApiResponse(data=LearningSummaryOut(**learning_service.learning_summary(db, current_user.id)))
