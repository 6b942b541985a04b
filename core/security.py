"""
Request identity and role checks

Sessions are handled by the gateway in front of the API, which forwards the
authenticated user's id in the ``X-User-Id`` header.
"""
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash

from core.database import get_db
from models.team import User
from utils.logging import get_logger

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the calling user or fail with 401"""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user = db.get(User, user_id)
    if user is None:
        logger.warning("Unknown user in request header", user_id=x_user_id)
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def require_roles(*roles: str):
    """Dependency factory: the caller must hold at least one of ``roles``"""

    def checker(user: User = Depends(get_current_user)) -> User:
        if not user.has_role(*roles):
            raise HTTPException(status_code=403, detail="Forbidden")
        return user

    return checker
