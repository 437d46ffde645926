# school_api/services/auth_service.py
from dataclasses import dataclass
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from school_api.models import User
from school_api.core.errors import InvalidCredentialsException, TokenError
from school_api.core.logging import logger
from school_api.core.permissions import Scope
from school_api.core.security import (
    TokenHandler,
    TokenType,
    create_access_token,
    create_refresh_token,
    verify_password,
)
from .base_service import BaseService, ServiceResult


@dataclass
class LoginResult:
    user: User
    long_token: str
    short_token: str


@dataclass
class RefreshResult:
    short_token: str


class AuthService(BaseService):
    """Credential checks and token issuance"""

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: Optional[int]) -> Optional[User]:
        if user_id is None:
            return None
        return await self.db.get(User, user_id)

    async def login(self, email: str, password: str) -> ServiceResult:
        """Check the credentials and issue a token pair.

        Unknown email, wrong password and deactivated account all fail the
        same way so the response does not reveal which accounts exist.
        """
        user = await self.get_user_by_email(email)
        if not user:
            logger.warning(f"Login attempt failed: User not found for email {email}")
            return ServiceResult.fail(InvalidCredentialsException())

        if not verify_password(password, user.password_hash):
            logger.warning(f"Login attempt failed: Invalid password for user {email}")
            return ServiceResult.fail(InvalidCredentialsException())

        if not user.is_active:
            logger.warning(f"Login attempt failed: Inactive account for user {email}")
            return ServiceResult.fail(InvalidCredentialsException())

        role = user.role.value
        long_token = create_refresh_token(user.id, role, user.school_id)
        short_token = create_access_token(user.id, role, user.school_id)

        logger.info(f"User {user.id} logged in", extra={"user_id": user.id, "role": role})
        return ServiceResult.success(
            LoginResult(user=user, long_token=long_token, short_token=short_token),
            message="Login successful",
        )

    async def refresh(self, long_token: str) -> ServiceResult:
        """Exchange a refresh token for a new access token.

        The claims are re-read from the user row, so a role or school change
        since login is picked up here.
        """
        try:
            payload = TokenHandler.verify_token(long_token.strip(), TokenType.REFRESH)
        except TokenError as e:
            return ServiceResult.fail(e)

        try:
            user_id = int(payload.get("userId"))
        except (TypeError, ValueError):
            return ServiceResult.fail(TokenError())

        user = await self.get_user_by_id(user_id)
        if not user or not user.is_active:
            logger.warning(f"Token refresh refused for user {user_id}")
            return ServiceResult.fail(TokenError())

        short_token = create_access_token(user.id, user.role.value, user.school_id)
        logger.info(f"Access token refreshed for user {user.id}")
        return ServiceResult.success(RefreshResult(short_token=short_token), message="Token refreshed")

    async def get_profile(self, scope: Scope) -> ServiceResult:
        user = await self.get_user_by_id(scope.user_id)
        if not user or not user.is_active:
            return ServiceResult.fail(TokenError())
        return ServiceResult.success(user)
