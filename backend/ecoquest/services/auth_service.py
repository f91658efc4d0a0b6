"""User accounts for the auth collaborator."""

from __future__ import annotations

import uuid

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ecoquest.core.security import hash_password, verify_password
from ecoquest.models.user import User
from ecoquest.schemas.auth import RegisterRequest


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def get_user(db: Session, user_id: uuid.UUID) -> User | None:
    return db.get(User, user_id)


def is_taken(db: Session, email: str, username: str) -> bool:
    existing = db.execute(
        select(User.id).where(or_(User.email == email, User.username == username)).limit(1)
    ).scalar_one_or_none()
    return existing is not None


def create_user(db: Session, data: RegisterRequest) -> User:
    user = User(
        email=data.email,
        username=data.username,
        hashed_password=hash_password(data.password),
        xp=0,
        level=1,
        total_eco_karma=0,
        corruption_cleared=0,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user
