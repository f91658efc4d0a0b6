"""Lesson, quiz and learning progress schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class LessonProgressOut(BaseModel):
    completed: bool
    completed_at: datetime | None
    quiz_score: int | None
    quiz_attempts: int

    model_config = {"from_attributes": True}


class LessonSummaryOut(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None
    god: str | None
    order: int
    unlocked: bool = True
    completed: bool = False
    quiz_score: int | None = None
    quiz_attempts: int = 0


class LessonOut(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None
    content: str
    god: str | None
    order: int
    progress: LessonProgressOut | None = None


class QuizQuestionOut(BaseModel):
    """Question as shown to the player; the answer key is withheld."""

    id: uuid.UUID
    question: str
    options: list[str]
    order: int

    model_config = {"from_attributes": True}


class QuizOut(BaseModel):
    lesson_id: uuid.UUID
    questions: list[QuizQuestionOut]


class QuizSubmitRequest(BaseModel):
    answers: list[int] = Field(min_length=1)


class QuestionResultOut(BaseModel):
    question_id: uuid.UUID
    is_correct: bool
    correct_answer: int
    explanation: str | None = None

    model_config = {"from_attributes": True}


class QuizResultOut(BaseModel):
    score: int
    passed: bool
    quiz_attempts: int
    results: list[QuestionResultOut]


class LearningSummaryOut(BaseModel):
    completed_lessons: int
    total_lessons: int
    completion_percent: int
    average_quiz_score: int
