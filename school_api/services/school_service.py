from typing import Any, Dict, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from school_api.models import School
from school_api.core.errors import ConflictError, NotFoundError
from school_api.core.logging import logger
from school_api.core.permissions import Scope
from .base_service import (
    BaseService,
    ServiceResult,
    Page,
    page_offset,
    clean_partial,
    DEFAULT_PAGE,
    DEFAULT_LIMIT,
)

DUPLICATE_NAME = "School with this name already exists"
NOT_FOUND = "School not found"
REQUIRED_FIELDS = ("name", "address")


class SchoolService(BaseService):
    """Schools are created, changed and deleted by superadmins only"""

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def get_active_school(self, school_id: Optional[int]) -> Optional[School]:
        """Return the school if it exists and is active, else None"""
        if school_id is None:
            return None
        result = await self.db.execute(
            select(School).where(School.id == school_id, School.is_active.is_(True))
        )
        return result.scalar_one_or_none()

    async def _name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        query = select(School.id).where(School.name == name, School.is_active.is_(True))
        if exclude_id is not None:
            query = query.where(School.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def create_school(self, scope: Scope, school_data: Dict[str, Any]) -> ServiceResult:
        """Create a school; names only have to be unique among active schools"""
        denied = scope.deny_unless_superadmin()
        if denied:
            return ServiceResult.fail(denied)

        if await self._name_taken(school_data["name"]):
            return ServiceResult.fail(ConflictError(DUPLICATE_NAME))

        school = School(**school_data, is_active=True)
        self.db.add(school)

        conflict = await self.commit_or_conflict(DUPLICATE_NAME)
        if conflict:
            return ServiceResult.fail(conflict)
        await self.db.refresh(school)

        logger.info(f"Created school {school.id} ({school.name}) by user {scope.user_id}")
        return ServiceResult.success(school)

    async def list_schools(
        self,
        scope: Scope,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> ServiceResult:
        """List active schools, newest first"""
        conditions = [School.is_active.is_(True)]

        total = await self.db.execute(select(func.count(School.id)).where(*conditions))

        query = (
            select(School)
            .where(*conditions)
            .order_by(School.created_at.desc(), School.id.desc())
            .offset(page_offset(page, limit))
            .limit(limit)
        )
        result = await self.db.execute(query)

        return ServiceResult.success(Page(
            key="schools",
            items=list(result.scalars().all()),
            total=total.scalar() or 0,
            page=page,
            limit=limit,
        ))

    async def get_school(self, scope: Scope, school_id: int) -> ServiceResult:
        """Fetch an active school.

        A school admin always gets their own school back, whatever id they
        asked for.
        """
        school = await self.get_active_school(scope.effective_school_id(school_id))
        if not school:
            logger.warning(f"School {school_id} not found for user {scope.user_id}")
            return ServiceResult.fail(NotFoundError(NOT_FOUND))
        return ServiceResult.success(school)

    async def update_school(
        self,
        scope: Scope,
        school_id: int,
        update_data: Dict[str, Any],
    ) -> ServiceResult:
        """Merge the supplied fields into the school.

        Unlike reads, updates also reach inactive schools.
        """
        denied = scope.deny_unless_superadmin()
        if denied:
            return ServiceResult.fail(denied)

        update_data = clean_partial(update_data, REQUIRED_FIELDS)
        school = await self.db.get(School, school_id)
        if not school:
            return ServiceResult.fail(NotFoundError(NOT_FOUND))

        new_name = update_data.get("name")
        if new_name and new_name != school.name and school.is_active:
            if await self._name_taken(new_name, exclude_id=school.id):
                return ServiceResult.fail(ConflictError(DUPLICATE_NAME))

        for field, value in update_data.items():
            setattr(school, field, value)

        conflict = await self.commit_or_conflict(DUPLICATE_NAME)
        if conflict:
            return ServiceResult.fail(conflict)
        await self.db.refresh(school)

        logger.info(f"Updated school {school_id}: {sorted(update_data)}")
        return ServiceResult.success(school)

    async def delete_school(self, scope: Scope, school_id: int) -> ServiceResult:
        """Soft-delete a school.

        Classrooms and students of the school are left untouched.
        """
        denied = scope.deny_unless_superadmin()
        if denied:
            return ServiceResult.fail(denied)

        school = await self.db.get(School, school_id)
        if not school:
            return ServiceResult.fail(NotFoundError(NOT_FOUND))

        school.is_active = False
        await self.db.commit()

        logger.info(f"Deactivated school {school_id}")
        return ServiceResult.success({"id": school_id}, message="School deleted successfully")
