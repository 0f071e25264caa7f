"""
Authentication service for user management.
"""
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.exceptions import UserAlreadyExistsError
from timeline_api.models.user import User
from timeline_api.schemas.user import UserCreate, Token
from timeline_api.utils.logger import log_info, log_warning
from timeline_api.utils.security import hash_password, verify_password, create_access_token


class AuthService:
    """
    Service for handling user authentication.
    Provides methods for registration, login, and user lookup.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(self, user_data: UserCreate) -> User:
        """
        Register a new user.

        Args:
            user_data: User registration data

        Returns:
            Created User model

        Raises:
            UserAlreadyExistsError: If email or username already exists
        """
        result = await self.db.execute(
            select(User.id).where(
                or_(User.email == user_data.email, User.username == user_data.username)
            )
        )
        if result.first() is not None:
            log_warning("Registration failed", event="auth", reason="user_exists")
            raise UserAlreadyExistsError("Email or username already registered")

        user = User(
            email=user_data.email,
            username=user_data.username,
            hashed_password=hash_password(user_data.password),
        )

        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        log_info("Registration", event="auth", user_id=user.id)
        return user

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate a user with email and password.

        Returns:
            User if authentication successful, None otherwise
        """
        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if not user:
            log_warning("Login failed", event="auth", reason="user_not_found")
            return None
        if not user.is_active:
            log_warning("Login failed", event="auth", reason="inactive", user_id=user.id)
            return None
        if not verify_password(password, user.hashed_password):
            log_warning("Login failed", event="auth", reason="invalid_password", user_id=user.id)
            return None
        log_info("Login", event="auth", user_id=user.id)
        return user

    async def login(self, email: str, password: str) -> Optional[Token]:
        """
        Login user and return a JWT token.

        Returns:
            Token if login successful, None otherwise
        """
        user = await self.authenticate(email, password)

        if not user:
            return None

        return Token(access_token=create_access_token(user.id))

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)
