from datetime import date
from typing import Any, Dict, Optional
from sqlalchemy import select, and_, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from school_api.models import Student
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
from .classroom_service import ClassroomService

DUPLICATE_EMAIL = "Student with this email already exists"
NOT_FOUND = "Student not found"
CLASSROOM_NOT_IN_SCHOOL = "Classroom not found in this school"
REQUIRED_FIELDS = ("first_name", "last_name", "email")
UPDATABLE_FIELDS = ("first_name", "last_name", "email", "date_of_birth", "classroom_id")


class StudentService(BaseService):
    def __init__(
        self,
        db: AsyncSession,
        school_service: Optional[SchoolService] = None,
        classroom_service: Optional[ClassroomService] = None,
    ):
        super().__init__(db)
        self.school_service = school_service or SchoolService(db)
        self.classroom_service = classroom_service or ClassroomService(db, self.school_service)

    def _with_references(self, query):
        return query.options(
            selectinload(Student.school),
            selectinload(Student.classroom),
        ).execution_options(populate_existing=True)

    async def scoped_lookup(self, student_id: int, school_id: Optional[int]) -> Optional[Student]:
        """Student by id, restricted to ``school_id`` when one is given.

        Unenrolled students are still returned; their record is kept.
        """
        conditions = [Student.id == student_id]
        if school_id is not None:
            conditions.append(Student.school_id == school_id)

        result = await self.db.execute(
            self._with_references(select(Student).where(and_(*conditions)))
        )
        return result.scalar_one_or_none()

    async def _email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        query = select(Student.id).where(Student.email == email)
        if exclude_id is not None:
            query = query.where(Student.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def create_student(
        self,
        scope: Scope,
        first_name: str,
        last_name: str,
        email: str,
        school_id: Optional[int] = None,
        classroom_id: Optional[int] = None,
        date_of_birth: Optional[date] = None,
    ) -> ServiceResult:
        """Enroll a student in an active school, and optionally one of its classrooms"""
        school_id = scope.effective_school_id(school_id)
        if school_id is None:
            return ServiceResult.fail(ValidationError("Missing required field: schoolId"))

        school = await self.school_service.get_active_school(school_id)
        if not school:
            return ServiceResult.fail(NotFoundError("School not found"))

        if classroom_id is not None:
            classroom = await self.classroom_service.find_active_in_school(classroom_id, school.id)
            if not classroom:
                return ServiceResult.fail(NotFoundError(CLASSROOM_NOT_IN_SCHOOL))

        # Email is unique across all schools
        if await self._email_taken(email):
            return ServiceResult.fail(ConflictError(DUPLICATE_EMAIL))

        student = Student(
            first_name=first_name,
            last_name=last_name,
            email=email,
            date_of_birth=date_of_birth,
            school_id=school.id,
            classroom_id=classroom_id,
            is_enrolled=True,
        )
        self.db.add(student)

        conflict = await self.commit_or_conflict(DUPLICATE_EMAIL)
        if conflict:
            return ServiceResult.fail(conflict)

        logger.info(f"Enrolled student {student.id} in school {school.id}")
        return ServiceResult.success(await self.scoped_lookup(student.id, school.id))

    async def list_students(
        self,
        scope: Scope,
        school_id: Optional[int] = None,
        classroom_id: Optional[int] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> ServiceResult:
        """List enrolled students; the school and classroom filters combine freely"""
        school_id = scope.effective_school_id(school_id)

        conditions = [Student.is_enrolled.is_(True)]
        if school_id is not None:
            conditions.append(Student.school_id == school_id)
        if classroom_id is not None:
            conditions.append(Student.classroom_id == classroom_id)

        total = await self.db.execute(
            select(func.count(Student.id)).where(and_(*conditions))
        )

        query = self._with_references(
            select(Student)
            .where(and_(*conditions))
            .order_by(Student.created_at.desc(), Student.id.desc())
            .offset(page_offset(page, limit))
            .limit(limit)
        )
        result = await self.db.execute(query)

        return ServiceResult.success(Page(
            key="students",
            items=list(result.scalars().all()),
            total=total.scalar() or 0,
            page=page,
            limit=limit,
        ))

    async def get_student(
        self,
        scope: Scope,
        student_id: int,
        school_id: Optional[int] = None,
    ) -> ServiceResult:
        student = await self.scoped_lookup(student_id, scope.effective_school_id(school_id))
        if not student:
            logger.warning(f"Student {student_id} not found for user {scope.user_id}")
            return ServiceResult.fail(NotFoundError(NOT_FOUND))
        return ServiceResult.success(student)

    async def update_student(
        self,
        scope: Scope,
        student_id: int,
        updates: Dict[str, Any],
        school_id: Optional[int] = None,
    ) -> ServiceResult:
        """Apply a partial update.

        ``school_id`` is stripped from the update for every role; moving a
        student between schools goes through the transfer operation.
        """
        updates = dict(updates)
        updates.pop("school_id", None)
        updates = {
            key: value for key, value in clean_partial(updates, REQUIRED_FIELDS).items()
            if key in UPDATABLE_FIELDS
        }

        student = await self.scoped_lookup(student_id, scope.effective_school_id(school_id))
        if not student:
            return ServiceResult.fail(NotFoundError(NOT_FOUND))

        new_classroom_id = updates.get("classroom_id")
        if new_classroom_id is not None:
            classroom = await self.classroom_service.find_active_in_school(
                new_classroom_id, student.school_id
            )
            if not classroom:
                return ServiceResult.fail(NotFoundError(CLASSROOM_NOT_IN_SCHOOL))

        new_email = updates.get("email")
        if new_email and new_email != student.email:
            if await self._email_taken(new_email, exclude_id=student.id):
                return ServiceResult.fail(ConflictError(DUPLICATE_EMAIL))

        for field, value in updates.items():
            setattr(student, field, value)

        conflict = await self.commit_or_conflict(DUPLICATE_EMAIL)
        if conflict:
            return ServiceResult.fail(conflict)

        logger.info(f"Updated student {student_id}: {sorted(updates)}")
        return ServiceResult.success(await self.scoped_lookup(student.id, student.school_id))

    async def delete_student(
        self,
        scope: Scope,
        student_id: int,
        school_id: Optional[int] = None,
    ) -> ServiceResult:
        """Unenroll the student; the record and its references are kept"""
        student = await self.scoped_lookup(student_id, scope.effective_school_id(school_id))
        if not student:
            return ServiceResult.fail(NotFoundError(NOT_FOUND))

        student.is_enrolled = False
        await self.db.commit()

        logger.info(f"Unenrolled student {student_id}")
        return ServiceResult.success({"id": student_id}, message="Student unenrolled successfully")
