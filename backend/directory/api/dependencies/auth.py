# backend/directory/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

Token verification lives in ``directory.auth``; these dependencies resolve
the token subject to a User row and enforce roles.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...auth import get_current_user as auth_get_current_user
from ...auth import get_current_user_optional as auth_get_current_user_optional
from ...models.user import User
from ...repositories.user_repository import UserRepository
from .database import get_db

logger = logging.getLogger(__name__)


async def get_current_active_user(
    user_id: str = Depends(auth_get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """
    Get the current authenticated user.

    Raises:
        HTTPException: 401 if the token subject has no user row
    """
    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        logger.warning(f"Valid token for unknown user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_current_user_optional(
    user_id: Optional[str] = Depends(auth_get_current_user_optional),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Current user when a valid token is present, else None."""
    if not user_id:
        return None
    return UserRepository(db).get_by_id(user_id)


async def require_admin(current_user: User = Depends(get_current_active_user)) -> User:
    """
    Require the current user to be an admin.

    Raises:
        HTTPException: 403 for non-admin users
    """
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
