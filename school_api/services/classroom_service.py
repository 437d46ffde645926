from typing import Any, Dict, List, Optional
from sqlalchemy import select, and_, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from school_api.models import Classroom
from school_api.core.errors import ConflictError, NotFoundError, ValidationError
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
from .school_service import SchoolService

DUPLICATE_NAME = "Classroom with this name already exists in this school"
NOT_FOUND = "Classroom not found"
REQUIRED_FIELDS = ("name", "capacity", "resources")
UPDATABLE_FIELDS = ("name", "capacity", "resources")


class ClassroomService(BaseService):
    def __init__(self, db: AsyncSession, school_service: Optional[SchoolService] = None):
        super().__init__(db)
        self.school_service = school_service or SchoolService(db)

    async def find_active_in_school(self, classroom_id: int, school_id: int) -> Optional[Classroom]:
        """Active classroom with this id that belongs to exactly this school"""
        result = await self.db.execute(
            select(Classroom).where(
                and_(
                    Classroom.id == classroom_id,
                    Classroom.school_id == school_id,
                    Classroom.is_active.is_(True)
                )
            )
        )
        return result.scalar_one_or_none()

    async def _scoped_lookup(self, classroom_id: int, school_id: Optional[int]) -> Optional[Classroom]:
        """Active classroom by id, restricted to ``school_id`` when one is given.

        This filter is what keeps a school admin from reading another
        school's classroom by guessing ids.
        """
        conditions = [Classroom.id == classroom_id, Classroom.is_active.is_(True)]
        if school_id is not None:
            conditions.append(Classroom.school_id == school_id)

        result = await self.db.execute(
            select(Classroom)
            .options(selectinload(Classroom.school))
            .where(and_(*conditions))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _name_taken(self, school_id: int, name: str, exclude_id: Optional[int] = None) -> bool:
        query = select(Classroom.id).where(
            and_(
                Classroom.school_id == school_id,
                Classroom.name == name,
                Classroom.is_active.is_(True)
            )
        )
        if exclude_id is not None:
            query = query.where(Classroom.id != exclude_id)
        existing = await self.db.execute(query.limit(1))
        return existing.scalar_one_or_none() is not None

    async def create_classroom(
        self,
        scope: Scope,
        name: str,
        capacity: int,
        school_id: Optional[int] = None,
        resources: Optional[List[str]] = None,
    ) -> ServiceResult:
        """Create a classroom under an active school"""
        school_id = scope.effective_school_id(school_id)
        if school_id is None:
            return ServiceResult.fail(ValidationError("Missing required field: schoolId"))

        school = await self.school_service.get_active_school(school_id)
        if not school:
            return ServiceResult.fail(NotFoundError("School not found"))

        if await self._name_taken(school.id, name):
            return ServiceResult.fail(ConflictError(DUPLICATE_NAME))

        classroom = Classroom(
            name=name,
            school_id=school.id,
            capacity=capacity,
            resources=list(resources or []),
            is_active=True,
        )
        self.db.add(classroom)

        conflict = await self.commit_or_conflict(DUPLICATE_NAME)
        if conflict:
            return ServiceResult.fail(conflict)

        logger.info(f"Created classroom {classroom.id} ({name}) in school {school.id}")
        return ServiceResult.success(await self._scoped_lookup(classroom.id, school.id))

    async def list_classrooms(
        self,
        scope: Scope,
        school_id: Optional[int] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> ServiceResult:
        """List active classrooms, optionally for a single school"""
        school_id = scope.effective_school_id(school_id)

        conditions = [Classroom.is_active.is_(True)]
        if school_id is not None:
            conditions.append(Classroom.school_id == school_id)

        total = await self.db.execute(
            select(func.count(Classroom.id)).where(and_(*conditions))
        )

        query = (
            select(Classroom)
            .options(selectinload(Classroom.school))
            .where(and_(*conditions))
            .order_by(Classroom.created_at.desc(), Classroom.id.desc())
            .offset(page_offset(page, limit))
            .limit(limit)
        )
        result = await self.db.execute(query)

        return ServiceResult.success(Page(
            key="classrooms",
            items=list(result.scalars().all()),
            total=total.scalar() or 0,
            page=page,
            limit=limit,
        ))

    async def get_classroom(
        self,
        scope: Scope,
        classroom_id: int,
        school_id: Optional[int] = None,
    ) -> ServiceResult:
        classroom = await self._scoped_lookup(classroom_id, scope.effective_school_id(school_id))
        if not classroom:
            logger.warning(f"Classroom {classroom_id} not found for user {scope.user_id}")
            return ServiceResult.fail(NotFoundError(NOT_FOUND))
        return ServiceResult.success(classroom)

    async def update_classroom(
        self,
        scope: Scope,
        classroom_id: int,
        updates: Dict[str, Any],
        school_id: Optional[int] = None,
    ) -> ServiceResult:
        """Apply a partial update; the owning school can never change"""
        updates = {
            key: value for key, value in clean_partial(updates, REQUIRED_FIELDS).items()
            if key in UPDATABLE_FIELDS
        }

        classroom = await self._scoped_lookup(classroom_id, scope.effective_school_id(school_id))
        if not classroom:
            return ServiceResult.fail(NotFoundError(NOT_FOUND))

        new_name = updates.get("name")
        if new_name and new_name != classroom.name:
            if await self._name_taken(classroom.school_id, new_name, exclude_id=classroom.id):
                return ServiceResult.fail(ConflictError(DUPLICATE_NAME))

        for field, value in updates.items():
            setattr(classroom, field, list(value) if field == "resources" else value)

        conflict = await self.commit_or_conflict(DUPLICATE_NAME)
        if conflict:
            return ServiceResult.fail(conflict)

        logger.info(f"Updated classroom {classroom_id}: {sorted(updates)}")
        return ServiceResult.success(await self._scoped_lookup(classroom.id, classroom.school_id))

    async def delete_classroom(
        self,
        scope: Scope,
        classroom_id: int,
        school_id: Optional[int] = None,
    ) -> ServiceResult:
        """Soft-delete; students assigned to the classroom keep their reference"""
        classroom = await self._scoped_lookup(classroom_id, scope.effective_school_id(school_id))
        if not classroom:
            return ServiceResult.fail(NotFoundError(NOT_FOUND))

        classroom.is_active = False
        await self.db.commit()

        logger.info(f"Deactivated classroom {classroom_id}")
        return ServiceResult.success({"id": classroom_id}, message="Classroom deleted successfully")
