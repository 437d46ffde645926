from fastapi import APIRouter, Depends, Path, Query, status

from school_api.core.dependencies import get_current_scope, get_school_service
from school_api.core.permissions import Scope
from school_api.core.responses import dispatch
from school_api.schemas.common import MAX_ID
from school_api.schemas.school import SchoolCreateRequest, SchoolUpdateRequest, SchoolResponse
from school_api.services import SchoolService

router = APIRouter(tags=["Schools"])


@router.get("")
async def list_schools(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    scope: Scope = Depends(get_current_scope),
    school_service: SchoolService = Depends(get_school_service)
):
    result = await school_service.list_schools(scope, page=page, limit=limit)
    return dispatch(result, SchoolResponse)

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_school(
    school_data: SchoolCreateRequest,
    scope: Scope = Depends(get_current_scope),
    school_service: SchoolService = Depends(get_school_service)
):
    """Create a new school (superadmin only)"""
    result = await school_service.create_school(scope, school_data.model_dump())
    return dispatch(result, SchoolResponse, status_code=status.HTTP_201_CREATED)

@router.get("/{school_id}")
async def get_school(
    school_id: int = Path(..., ge=1, le=MAX_ID),
    scope: Scope = Depends(get_current_scope),
    school_service: SchoolService = Depends(get_school_service)
):
    result = await school_service.get_school(scope, school_id)
    return dispatch(result, SchoolResponse)

@router.put("/{school_id}")
async def update_school(
    update_data: SchoolUpdateRequest,
    school_id: int = Path(..., ge=1, le=MAX_ID),
    scope: Scope = Depends(get_current_scope),
    school_service: SchoolService = Depends(get_school_service)
):
    result = await school_service.update_school(
        scope, school_id, update_data.model_dump(exclude_unset=True)
    )
    return dispatch(result, SchoolResponse)

@router.delete("/{school_id}")
async def delete_school(
    school_id: int = Path(..., ge=1, le=MAX_ID),
    scope: Scope = Depends(get_current_scope),
    school_service: SchoolService = Depends(get_school_service)
):
    """Soft-delete a school (superadmin only)"""
    result = await school_service.delete_school(scope, school_id)
    return dispatch(result)
