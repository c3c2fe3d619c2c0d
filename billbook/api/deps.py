"""API Dependencies"""

from typing import List, Optional
from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from billbook.database import get_db
from billbook.core.security import decode_token
from billbook.services.user_service import UserService
from billbook.models.user import User

# Security scheme for bearer token
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> User:
    """
    Get current authenticated user from the bearer token.

    Raises:
        HTTPException: 401 if the header, token or user is missing or invalid
    """
    if credentials is None:
        raise _unauthorized("Missing Authorization header")

    payload = decode_token(credentials.credentials)
    if not payload or payload.get("type") != "access":
        raise _unauthorized("Invalid token")

    user_id_str: Optional[str] = payload.get("sub")
    try:
        user_id = UUID(user_id_str) if user_id_str else None
    except ValueError:
        user_id = None
    if user_id is None:
        raise _unauthorized("Invalid token")

    user = await UserService.get_user_by_id(db, user_id)
    if not user or not user.is_active:
        raise _unauthorized("Could not validate credentials")

    return user


def excluded_participants(
    exclude: List[UUID] = Query(
        default=[],
        description="Participant ids to leave out; their shares are redistributed",
    ),
) -> frozenset:
    """Exclusion set from repeated ?exclude=<id> query parameters."""
    return frozenset(exclude)
