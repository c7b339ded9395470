from __future__ import annotations
import logging

import jwt  # PyJWT
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from core.config_loader import settings
from core.database import get_db
from account.models import Profile

log = logging.getLogger("shiftmarket.auth")

bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict:
    return jwt.decode(
        token,
        settings.AUTH_JWT_SECRET,
        algorithms=[settings.AUTH_JWT_ALGORITHM],
        audience=settings.AUTH_JWT_AUDIENCE,
        options={"require": ["exp", "sub"]},
    )


def get_token_subject(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Provider user id of a valid token. No profile is required yet (onboarding)."""
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError as e:
        log.info("rejected token: %s", e)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return str(payload["sub"])


def get_current_user(
    db: Session = Depends(get_db),
    subject: str = Depends(get_token_subject),
) -> Profile:
    profile = db.get(Profile, subject)
    if not profile:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return profile


def get_current_active_user(user: Profile = Depends(get_current_user)) -> Profile:
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Inactive user")
    return user
