"""Moving a student to another school.

This is the only write that changes a student's owning school. Every check
runs before the single row update at the end, so a failed transfer never
leaves partial state behind.
"""
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from school_api.core.errors import NotFoundError
from school_api.core.logging import logger
from school_api.core.permissions import Scope
from .base_service import BaseService, ServiceResult
from .school_service import SchoolService
from .classroom_service import ClassroomService
from .student_service import StudentService, NOT_FOUND as STUDENT_NOT_FOUND


class TransferService(BaseService):
    def __init__(self, db: AsyncSession, student_service: Optional[StudentService] = None):
        super().__init__(db)
        self.student_service = student_service or StudentService(db)
        self.school_service: SchoolService = self.student_service.school_service
        self.classroom_service: ClassroomService = self.student_service.classroom_service

    async def transfer_student(
        self,
        scope: Scope,
        student_id: int,
        target_school_id: int,
        target_classroom_id: Optional[int] = None,
    ) -> ServiceResult:
        """Reassign a student's school and classroom in one update.

        A school admin can only move students their own school currently
        owns; any other student looks missing. The target school may be the
        student's current school.
        """
        # Only school admins carry a requestor school; superadmins are unrestricted
        requestor_school_id = scope.effective_school_id(None)

        student = await self.student_service.scoped_lookup(student_id, requestor_school_id)
        if not student:
            logger.warning(f"Transfer of student {student_id} refused for user {scope.user_id}")
            return ServiceResult.fail(NotFoundError(STUDENT_NOT_FOUND))

        target_school = await self.school_service.get_active_school(target_school_id)
        if not target_school:
            return ServiceResult.fail(NotFoundError("Target school not found"))

        if target_classroom_id is not None:
            classroom = await self.classroom_service.find_active_in_school(
                target_classroom_id, target_school.id
            )
            if not classroom:
                return ServiceResult.fail(
                    NotFoundError("Target classroom not found in target school")
                )

        source_school_id = student.school_id
        student.school_id = target_school.id
        student.classroom_id = target_classroom_id
        await self.db.commit()

        logger.info(
            f"Transferred student {student_id} from school {source_school_id} "
            f"to school {target_school.id} (classroom {target_classroom_id})"
        )
        return ServiceResult.success(
            await self.student_service.scoped_lookup(student.id, target_school.id)
        )
