from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, status

from school_api.core.dependencies import get_current_scope, get_classroom_service
from school_api.core.permissions import Scope
from school_api.core.responses import dispatch
from school_api.schemas.common import MAX_ID
from school_api.schemas.classroom import (
    ClassroomCreateRequest,
    ClassroomUpdateRequest,
    ClassroomResponse
)
from school_api.services import ClassroomService

router = APIRouter(tags=["Classrooms"])

# For school admins every schoolId below is replaced by their own school


@router.get("")
async def list_classrooms(
    school_id: Optional[int] = Query(None, alias="schoolId", ge=1, le=MAX_ID),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    scope: Scope = Depends(get_current_scope),
    classroom_service: ClassroomService = Depends(get_classroom_service)
):
    result = await classroom_service.list_classrooms(
        scope, school_id=school_id, page=page, limit=limit
    )
    return dispatch(result, ClassroomResponse)

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_classroom(
    request: ClassroomCreateRequest,
    scope: Scope = Depends(get_current_scope),
    classroom_service: ClassroomService = Depends(get_classroom_service)
):
    result = await classroom_service.create_classroom(
        scope,
        name=request.name,
        capacity=request.capacity,
        school_id=request.school_id,
        resources=request.resources,
    )
    return dispatch(result, ClassroomResponse, status_code=status.HTTP_201_CREATED)

@router.get("/{classroom_id}")
async def get_classroom(
    classroom_id: int = Path(..., ge=1, le=MAX_ID),
    school_id: Optional[int] = Query(None, alias="schoolId", ge=1, le=MAX_ID),
    scope: Scope = Depends(get_current_scope),
    classroom_service: ClassroomService = Depends(get_classroom_service)
):
    result = await classroom_service.get_classroom(scope, classroom_id, school_id=school_id)
    return dispatch(result, ClassroomResponse)

@router.put("/{classroom_id}")
async def update_classroom(
    request: ClassroomUpdateRequest,
    classroom_id: int = Path(..., ge=1, le=MAX_ID),
    school_id: Optional[int] = Query(None, alias="schoolId", ge=1, le=MAX_ID),
    scope: Scope = Depends(get_current_scope),
    classroom_service: ClassroomService = Depends(get_classroom_service)
):
    result = await classroom_service.update_classroom(
        scope, classroom_id, request.model_dump(exclude_unset=True), school_id=school_id
    )
    return dispatch(result, ClassroomResponse)

@router.delete("/{classroom_id}")
async def delete_classroom(
    classroom_id: int = Path(..., ge=1, le=MAX_ID),
    school_id: Optional[int] = Query(None, alias="schoolId", ge=1, le=MAX_ID),
    scope: Scope = Depends(get_current_scope),
    classroom_service: ClassroomService = Depends(get_classroom_service)
):
    result = await classroom_service.delete_classroom(scope, classroom_id, school_id=school_id)
    return dispatch(result)
