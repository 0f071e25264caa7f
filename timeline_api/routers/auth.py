"""
Authentication router for user registration and login.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.database import get_db
from timeline_api.dependencies.auth import get_current_active_user
from timeline_api.exceptions import UserAlreadyExistsError
from timeline_api.models.user import User
from timeline_api.schemas.user import UserCreate, UserResponse, UserLogin, Token
from timeline_api.services.auth import AuthService
from timeline_api.utils.logger import log_info, log_warning
from timeline_api.utils.prometheus_metrics import user_login_total, user_registration_total

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """
    Register a new user account.

    - **email**: Valid email address (must be unique)
    - **username**: Username (3-100 characters, must be unique)
    - **password**: Password (8-72 characters)
    """
    try:
        user = await AuthService(db).register(user_data)
    except UserAlreadyExistsError:
        user_registration_total.labels(result="failure").inc()
        log_warning(
            "User registration failed - account already exists",
            event="user_registration",
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Registration failed",
        )

    log_info(
        "User registration completed",
        event="user_registration",
        user_id=user.id,
    )
    user_registration_total.labels(result="success").inc()
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=Token,
    summary="Login to get access token",
)
async def login(
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> Token:
    """
    Login with email and password to get a JWT access token.

    Send it as `Authorization: Bearer <token>` to authenticated endpoints.
    """
    token = await AuthService(db).login(login_data.email, login_data.password)
    user_login_total.labels(result="success" if token else "failure").inc()

    if not token:
        log_warning(
            "Login failed - invalid credentials",
            event="user_login",
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    log_info(
        "User login successful",
        event="user_login",
    )
    return token


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user profile",
)
async def get_me(
    current_user: User = Depends(get_current_active_user),
) -> UserResponse:
    return UserResponse.model_validate(current_user)
