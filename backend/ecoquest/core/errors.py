"""Domain errors raised by services and rendered by the API error handlers.

Every error carries a human-readable message and belongs to one kind. The kind
decides the HTTP status; routers never catch these themselves.
"""

from __future__ import annotations

from fastapi import status


class DomainError(Exception):
    """Base class for expected, recoverable failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    kind: str = "invalid_state"
    default_message: str = "Request could not be completed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# Kinds


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"
    default_message = "Not found"


class InvalidStateError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "invalid_state"


class LockedError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "locked"
    default_message = "Locked"


class InvalidInputError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "invalid_input"
    default_message = "Invalid input"


class UnauthenticatedError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "unauthenticated"
    default_message = "User not authenticated"


class ForbiddenError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"
    default_message = "Forbidden"


# Not found


class UserNotFound(NotFoundError):
    default_message = "User not found"


class MissionNotFound(NotFoundError):
    default_message = "Mission not found"


class ProgressNotFound(NotFoundError):
    default_message = "Mission progress not found. Start the mission first."


class BadgeNotFound(NotFoundError):
    default_message = "Badge not found"


class ProofNotFound(NotFoundError):
    default_message = "Proof not found"


class ProofFileMissing(NotFoundError):
    default_message = "Uploaded file not found in storage"


class LessonNotFound(NotFoundError):
    default_message = "Lesson not found"


class QuizNotFound(NotFoundError):
    default_message = "Quiz not found"


# Invalid state


class MissionInactive(InvalidStateError):
    default_message = "Mission is not active"


class AlreadyCompleted(InvalidStateError):
    default_message = "Mission already completed"


class NotStarted(InvalidStateError):
    default_message = "Mission must be started before completion"


class DuplicateReward(InvalidStateError):
    default_message = "Reward already issued for this mission"


class LessonAlreadyCompleted(InvalidStateError):
    default_message = "Lesson already completed"


class AlreadyEarnedBadge(InvalidStateError):
    default_message = "Badge already earned"


class GodAlreadySelected(InvalidStateError):
    default_message = "You are already aligned with this god"


class GodChangeRequiresForce(InvalidStateError):
    default_message = "God already selected. Pass force=true to change alignment."


# Locked


class MissionLocked(LockedError):
    default_message = "This mission is locked. Complete the prerequisite mission first."


# Invalid input


class InvalidProgress(InvalidInputError):
    default_message = "Progress must be between 0 and 100"


class InvalidRegion(InvalidInputError):
    default_message = "Invalid region"


class InvalidAmount(InvalidInputError):
    default_message = "Amount must be a non-negative integer"


class InvalidGod(InvalidInputError):
    default_message = "Unknown god"


class AnswerCountMismatch(InvalidInputError):
    default_message = "Number of answers must match number of questions"


class MissingReplayHeaders(InvalidInputError):
    default_message = "Missing or invalid nonce/timestamp headers"


class ReplayedRequest(InvalidInputError):
    default_message = "Invalid or replayed request"


# Forbidden


class Forbidden(ForbiddenError):
    pass
