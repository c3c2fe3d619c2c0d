from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from billbook.api import deps
from billbook.core import security
from billbook.models.user import User
from billbook.services.user_service import UserService
from billbook.schemas.auth import LoginRequest, Token
from billbook.schemas.user import UserCreate, UserResponse
from billbook.schemas.responses import SuccessResponse

router = APIRouter()


@router.post("/register", response_model=SuccessResponse[UserResponse])
async def register(
    user_in: UserCreate,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """Create an account. Fails with 400 when the email is taken."""
    user = await UserService.create_user(db, user_in)
    return SuccessResponse(
        data=UserResponse.model_validate(user),
        message="Registered",
    )


@router.post("/login", response_model=SuccessResponse[Token])
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """Exchange email and password for a bearer access token."""
    user = await UserService.authenticate_user(db, email=login_data.email, password=login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    access_token = security.create_access_token(
        data={"sub": str(user.id), "email": user.email}
    )
    return SuccessResponse(
        data=Token(access_token=access_token, user_id=str(user.id)),
        message="Login successful"
    )


@router.get("/me", response_model=SuccessResponse[UserResponse])
async def read_me(
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    return SuccessResponse(data=UserResponse.model_validate(current_user))
