"""User Service - Business Logic Layer"""

from typing import Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from billbook.core.exceptions import ValidationError
from billbook.core.security import get_password_hash, verify_password
from billbook.models.user import User
from billbook.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for account operations"""

    @staticmethod
    async def create_user(db: AsyncSession, data: UserCreate) -> User:
        """
        Register a new account.

        Raises:
            ValidationError: If the email is already registered
        """
        if await UserService.get_user_by_email(db, data.email):
            raise ValidationError("Email already registered")

        user = User(
            email=data.email,
            hashed_password=get_password_hash(data.password),
            is_active=True,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        logger.info("User registered", extra={"user_id": str(user.id)})
        return user

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.strip().lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def authenticate_user(
        db: AsyncSession,
        email: str,
        password: str
    ) -> Optional[User]:
        """
        Authenticate user with email and password.

        Args:
            db: Database session
            email: User email
            password: Plain text password

        Returns:
            User if authenticated, None otherwise
        """
        user = await UserService.get_user_by_email(db, email)

        if not user:
            return None

        if not verify_password(password, user.hashed_password):
            return None

        if not user.is_active:
            return None

        return user
