# school_api/services/user_service.py
from typing import Optional
from sqlalchemy import select, or_, func
from sqlalchemy.ext.asyncio import AsyncSession

from school_api.models import User
from school_api.core.errors import ConflictError, NotFoundError
from school_api.core.logging import logger
from school_api.core.permissions import Scope
from school_api.core.security import get_password_hash
from school_api.schemas.user.role import UserRoleEnum
from .base_service import (
    BaseService,
    ServiceResult,
    Page,
    page_offset,
    DEFAULT_PAGE,
    DEFAULT_LIMIT,
)
from .school_service import SchoolService

DUPLICATE_ACCOUNT = "Username or email already taken"
NOT_FOUND = "User not found"


class UserService(BaseService):
    """Administrator accounts. Every operation here is superadmin-only."""

    def __init__(self, db: AsyncSession, school_service: Optional[SchoolService] = None):
        super().__init__(db)
        self.school_service = school_service or SchoolService(db)

    async def _account_taken(self, username: str, email: str) -> bool:
        result = await self.db.execute(
            select(User.id)
            .where(or_(User.username == username, User.email == email))
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def _create_user(
        self,
        username: str,
        email: str,
        password: str,
        role: UserRoleEnum,
        school_id: Optional[int],
    ) -> ServiceResult:
        email = email.lower()
        if await self._account_taken(username, email):
            return ServiceResult.fail(ConflictError(DUPLICATE_ACCOUNT))

        user = User(
            username=username,
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            school_id=school_id,
            is_active=True,
        )
        self.db.add(user)

        conflict = await self.commit_or_conflict(DUPLICATE_ACCOUNT)
        if conflict:
            return ServiceResult.fail(conflict)
        await self.db.refresh(user)
        return ServiceResult.success(user)

    async def register(
        self,
        scope: Scope,
        username: str,
        email: str,
        password: str,
        role: UserRoleEnum = UserRoleEnum.SCHOOL_ADMIN,
        school_id: Optional[int] = None,
    ) -> ServiceResult:
        """Create an administrator account.

        A school admin must be attached to an active school. A superadmin
        never carries one, whatever was sent.
        """
        denied = scope.deny_unless_superadmin()
        if denied:
            return ServiceResult.fail(denied)

        if role.is_school_scoped:
            school = await self.school_service.get_active_school(school_id)
            if not school:
                return ServiceResult.fail(NotFoundError("School not found"))
        else:
            school_id = None

        result = await self._create_user(username, email, password, role, school_id)
        if result.ok:
            logger.info(
                f"Registered {role.value} {result.data.id} by user {scope.user_id}",
                extra={"user_id": scope.user_id}
            )
        return result

    async def list_users(
        self,
        scope: Scope,
        role: Optional[UserRoleEnum] = None,
        school_id: Optional[int] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> ServiceResult:
        denied = scope.deny_unless_superadmin()
        if denied:
            return ServiceResult.fail(denied)

        conditions = []
        if role is not None:
            conditions.append(User.role == role)
        if school_id is not None:
            conditions.append(User.school_id == school_id)

        total = await self.db.execute(select(func.count(User.id)).where(*conditions))
        result = await self.db.execute(
            select(User)
            .where(*conditions)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(page_offset(page, limit))
            .limit(limit)
        )

        return ServiceResult.success(Page(
            key="users",
            items=list(result.scalars().all()),
            total=total.scalar() or 0,
            page=page,
            limit=limit,
        ))

    async def deactivate_user(self, scope: Scope, user_id: int) -> ServiceResult:
        """Soft-delete an account; its tokens stop refreshing from now on"""
        denied = scope.deny_unless_superadmin()
        if denied:
            return ServiceResult.fail(denied)

        user = await self.db.get(User, user_id)
        if not user:
            return ServiceResult.fail(NotFoundError(NOT_FOUND))

        user.is_active = False
        await self.db.commit()

        logger.info(f"Deactivated user {user_id} by user {scope.user_id}")
        return ServiceResult.success({"id": user_id}, message="User deactivated successfully")

    async def bootstrap_superadmin(self, username: str, email: str, password: str) -> Optional[User]:
        """Create the first superadmin unless one already exists.

        Returns the new user, or None when nothing was created.
        """
        existing = await self.db.execute(
            select(User.id).where(User.role == UserRoleEnum.SUPERADMIN).limit(1)
        )
        if existing.scalar_one_or_none() is not None:
            logger.debug("Superadmin already present, skipping bootstrap")
            return None

        result = await self._create_user(
            username, email, password, UserRoleEnum.SUPERADMIN, None
        )
        if not result.ok:
            logger.warning(f"Superadmin bootstrap skipped: {result.message}")
            return None

        logger.info(f"Bootstrapped superadmin {result.data.id} ({email})")
        return result.data
