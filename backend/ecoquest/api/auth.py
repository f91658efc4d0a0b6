"""Auth endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ecoquest.core.deps import get_current_user
from ecoquest.core.security import create_access_token
from ecoquest.db.session import get_db
from ecoquest.models.user import User
from ecoquest.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserMe
from ecoquest.schemas.envelope import ApiResponse
from ecoquest.services.auth_service import authenticate_user, create_user, is_taken

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=ApiResponse[UserMe], status_code=status.HTTP_201_CREATED)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Register a new player."""
    if is_taken(db, data.email, data.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email or username already registered",
        )
    user = create_user(db, data)
    return ApiResponse(data=UserMe.model_validate(user))


@router.post("/login", response_model=ApiResponse[TokenResponse])
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
):
    """Login and return access token."""
    user = authenticate_user(db, data.email, data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    token = create_access_token(user.id)
    return ApiResponse(data=TokenResponse(access_token=token))


@router.get("/me", response_model=ApiResponse[UserMe])
def me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user."""
    return ApiResponse(data=UserMe.model_validate(current_user))
