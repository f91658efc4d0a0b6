"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ecoquest.core.errors import UnauthenticatedError
from ecoquest.core.security import user_id_from_token
from ecoquest.db.session import get_db
from ecoquest.models.user import User
from ecoquest.services.auth_service import get_user

security = HTTPBearer(auto_error=False)


def get_current_user(
    db: Annotated[Session, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    """Resolve the bearer token to an active player. Every failure is a 401."""
    if not credentials:
        raise UnauthenticatedError("Not authenticated")
    user_id = user_id_from_token(credentials.credentials)
    if user_id is None:
        raise UnauthenticatedError("Invalid or expired token")
    user = get_user(db, user_id)
    if not user:
        raise UnauthenticatedError("User not found")
    if not user.is_active:
        raise UnauthenticatedError("User is inactive")
    return user
