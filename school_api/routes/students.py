from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, status

from school_api.core.dependencies import (
    get_current_scope,
    get_student_service,
    get_transfer_service
)
from school_api.core.permissions import Scope
from school_api.core.responses import dispatch
from school_api.schemas.common import MAX_ID
from school_api.schemas.student import (
    StudentCreateRequest,
    StudentUpdateRequest,
    StudentTransferRequest,
    StudentResponse
)
from school_api.services import StudentService, TransferService

router = APIRouter(tags=["Students"])


@router.get("")
async def list_students(
    school_id: Optional[int] = Query(None, alias="schoolId", ge=1, le=MAX_ID),
    classroom_id: Optional[int] = Query(None, alias="classroomId", ge=1, le=MAX_ID),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    scope: Scope = Depends(get_current_scope),
    student_service: StudentService = Depends(get_student_service)
):
    """List enrolled students"""
    result = await student_service.list_students(
        scope,
        school_id=school_id,
        classroom_id=classroom_id,
        page=page,
        limit=limit,
    )
    return dispatch(result, StudentResponse)

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_student(
    request: StudentCreateRequest,
    scope: Scope = Depends(get_current_scope),
    student_service: StudentService = Depends(get_student_service)
):
    result = await student_service.create_student(
        scope,
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        school_id=request.school_id,
        classroom_id=request.classroom_id,
        date_of_birth=request.date_of_birth,
    )
    return dispatch(result, StudentResponse, status_code=status.HTTP_201_CREATED)

@router.get("/{student_id}")
async def get_student(
    student_id: int = Path(..., ge=1, le=MAX_ID),
    school_id: Optional[int] = Query(None, alias="schoolId", ge=1, le=MAX_ID),
    scope: Scope = Depends(get_current_scope),
    student_service: StudentService = Depends(get_student_service)
):
    result = await student_service.get_student(scope, student_id, school_id=school_id)
    return dispatch(result, StudentResponse)

@router.put("/{student_id}")
async def update_student(
    request: StudentUpdateRequest,
    student_id: int = Path(..., ge=1, le=MAX_ID),
    school_id: Optional[int] = Query(None, alias="schoolId", ge=1, le=MAX_ID),
    scope: Scope = Depends(get_current_scope),
    student_service: StudentService = Depends(get_student_service)
):
    result = await student_service.update_student(
        scope, student_id, request.model_dump(exclude_unset=True), school_id=school_id
    )
    return dispatch(result, StudentResponse)

@router.delete("/{student_id}")
async def delete_student(
    student_id: int = Path(..., ge=1, le=MAX_ID),
    school_id: Optional[int] = Query(None, alias="schoolId", ge=1, le=MAX_ID),
    scope: Scope = Depends(get_current_scope),
    student_service: StudentService = Depends(get_student_service)
):
    """Unenroll a student; the record is kept"""
    result = await student_service.delete_student(scope, student_id, school_id=school_id)
    return dispatch(result)

@router.post("/{student_id}/transfer")
async def transfer_student(
    request: StudentTransferRequest,
    student_id: int = Path(..., ge=1, le=MAX_ID),
    scope: Scope = Depends(get_current_scope),
    transfer_service: TransferService = Depends(get_transfer_service)
):
    """Move a student to another school, optionally into one of its classrooms"""
    result = await transfer_service.transfer_student(
        scope,
        student_id,
        target_school_id=request.target_school_id,
        target_classroom_id=request.target_classroom_id,
    )
    return dispatch(result, StudentResponse)
