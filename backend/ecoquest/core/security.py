"""Player credentials: bcrypt password hashes and bearer tokens keyed by user id."""

import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from ecoquest.core.config import settings

TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def create_access_token(user_id: uuid.UUID) -> str:
    """Issue a token whose ``sub`` is the player's id. Emails can change, ids cannot."""
    issued = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "typ": TOKEN_TYPE,
        "iat": issued,
        "exp": issued + timedelta(minutes=settings.jwt_expire_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def user_id_from_token(token: str) -> uuid.UUID | None:
    """Player id carried by a valid access token, or None for anything else."""
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    if claims.get("typ") != TOKEN_TYPE:
        return None
    try:
        return uuid.UUID(str(claims.get("sub")))
    except ValueError:
        return None
