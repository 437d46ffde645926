# school_api/core/security.py

from datetime import datetime, timedelta, timezone
import secrets
from enum import Enum
from typing import Dict, Optional, Any
from jose import JWTError, jwt
from passlib.context import CryptContext

from school_api.core.config import settings
from school_api.core.errors import TokenError
from school_api.core.logging import logger

class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"

class SecurityConfig:
    """Security configuration constants"""
    MIN_PASSWORD_LENGTH = 6
    MAX_PASSWORD_LENGTH = 72  # bcrypt only reads the first 72 bytes
    ACCESS_TOKEN_EXPIRE = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    REFRESH_TOKEN_EXPIRE = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__default_rounds=settings.BCRYPT_ROUNDS
)

def get_password_hash(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash"""
    return pwd_context.verify(plain_password, hashed_password)

class TokenHandler:
    """JWT token generation and validation.

    Both token types carry the same claim set: ``userId``, ``role`` and
    ``schoolId`` (``None`` for superadmins). They differ only in lifetime
    and in the ``type`` claim, which is checked on verification.
    """

    @staticmethod
    def create_token(
        data: Dict[str, Any],
        token_type: TokenType,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """Create JWT token with specified type and expiration"""
        to_encode = data.copy()

        if expires_delta is None:
            if token_type == TokenType.REFRESH:
                expires_delta = SecurityConfig.REFRESH_TOKEN_EXPIRE
            else:
                expires_delta = SecurityConfig.ACCESS_TOKEN_EXPIRE

        now = datetime.now(timezone.utc)
        to_encode.update({
            "iat": now,
            "exp": now + expires_delta,
            "type": token_type.value,
            "jti": secrets.token_urlsafe(16)  # Unique token ID
        })

        return jwt.encode(
            to_encode,
            settings.get_jwt_key(),
            algorithm=settings.ALGORITHM
        )

    @staticmethod
    def verify_token(
        token: str,
        token_type: Optional[TokenType] = None
    ) -> Dict[str, Any]:
        """
        Verify JWT token and optionally check token type

        Args:
            token: JWT token to verify
            token_type: Expected token type (optional)

        Returns:
            Dict containing token payload

        Raises:
            TokenError: If token is invalid, expired or of the wrong type
        """
        try:
            payload = jwt.decode(
                token,
                settings.get_jwt_key(),
                algorithms=[settings.ALGORITHM]
            )
        except JWTError as e:
            logger.warning(f"Token verification failed: {str(e)}")
            raise TokenError()

        if token_type and payload.get("type") != token_type.value:
            raise TokenError(f"Invalid token type. Expected {token_type.value}")

        if "userId" not in payload or "role" not in payload:
            raise TokenError("Token is missing required claims")

        return payload

def _claims(user_id: int, role: str, school_id: Optional[int]) -> Dict[str, Any]:
    return {
        "userId": user_id,
        "role": role,
        "schoolId": school_id,
    }

def create_access_token(user_id: int, role: str, school_id: Optional[int]) -> str:
    """Create the short-lived credential used on every request"""
    return TokenHandler.create_token(_claims(user_id, role, school_id), TokenType.ACCESS)

def create_refresh_token(user_id: int, role: str, school_id: Optional[int]) -> str:
    """Create the long-lived credential exchanged for new access tokens"""
    return TokenHandler.create_token(_claims(user_id, role, school_id), TokenType.REFRESH)
