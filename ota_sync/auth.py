"""
Capability gate for the operator API.

Tokens are issued by the hotel backend's auth service (HS256, claim userId).
This module only verifies them and checks that the user is still active and
holds the manager or admin role.
"""

from __future__ import annotations

from typing import Any, Optional

import jwt
import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.engine import Engine

from ota_sync.config import JWT_ALGORITHM, JWT_SECRET
from ota_sync.dependencies import get_db_engine
from ota_sync.models.hotel import User

logger = structlog.get_logger(__name__)

MANAGER_ROLES = frozenset({"manager", "admin"})

bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a bearer token and return its claims.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the signature or format is invalid
    """
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Resolve the active user behind the request's bearer token.

    Raises:
        HTTPException: 401 if the token is missing, expired or its user is gone;
            403 if the token is invalid
    """
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token required")

    try:
        claims = decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except jwt.InvalidTokenError:
        logger.warning("invalid_access_token")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")

    user_id = claims.get("userId")
    with db_engine.connect() as conn:
        row = (
            conn.execute(
                select(User.id, User.username, User.role).where(
                    User.id == user_id, User.is_active.is_(True)
                )
            )
            .mappings()
            .fetchone()
        )

    if row is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token - user not found"
        )

    return dict(row)


def require_manager(user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    """Allow only managers and admins through."""
    if user["role"] not in MANAGER_ROLES:
        logger.warning("manager_access_denied", user_id=user["id"], role=user["role"])
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Manager access required")
    return user
