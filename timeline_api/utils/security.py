"""
Security utility functions for password hashing, JWT tokens and share tokens.
"""
import secrets
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from timeline_api.config import get_settings
from timeline_api.schemas.user import TokenPayload

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password string
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Hashed password to compare against

    Returns:
        True if password matches
    """
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: int,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: User ID to encode in the token
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    expire = datetime.utcnow() + expires_delta

    to_encode = {
        "sub": str(user_id),  # JWT subject must be a string
        "exp": expire,
    }

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> Optional[TokenPayload]:
    """
    Decode and validate a JWT access token.

    Args:
        token: JWT token string

    Returns:
        TokenPayload if valid, None if invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )

        user_id = payload.get("sub")
        exp = payload.get("exp")

        if user_id is None:
            return None

        return TokenPayload(
            sub=int(user_id),
            exp=datetime.utcfromtimestamp(exp),
        )

    except (JWTError, ValueError, TypeError):
        return None


def generate_share_token(nbytes: Optional[int] = None) -> str:
    """
    Generate an unguessable, URL-safe token for public timeline links.

    Args:
        nbytes: Random bytes of entropy (defaults to settings.share_token_bytes,
            never less than 16)

    Returns:
        Random URL-safe token string
    """
    if nbytes is None:
        nbytes = settings.share_token_bytes
    return secrets.token_urlsafe(max(nbytes, 16))
