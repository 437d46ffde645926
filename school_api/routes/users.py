from typing import Optional
from fastapi import APIRouter, Depends, Path, Query

from school_api.core.dependencies import get_superadmin_scope, get_user_service
from school_api.core.permissions import Scope
from school_api.core.responses import dispatch
from school_api.schemas.common import MAX_ID
from school_api.schemas.user import UserRoleEnum, UserResponse
from school_api.services import UserService

router = APIRouter(tags=["Users"])


@router.get("")
async def list_users(
    role: Optional[UserRoleEnum] = Query(None),
    school_id: Optional[int] = Query(None, alias="schoolId", ge=1, le=MAX_ID),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    scope: Scope = Depends(get_superadmin_scope),
    user_service: UserService = Depends(get_user_service)
):
    result = await user_service.list_users(
        scope, role=role, school_id=school_id, page=page, limit=limit
    )
    return dispatch(result, UserResponse)

@router.delete("/{user_id}")
async def deactivate_user(
    user_id: int = Path(..., ge=1, le=MAX_ID),
    scope: Scope = Depends(get_superadmin_scope),
    user_service: UserService = Depends(get_user_service)
):
    result = await user_service.deactivate_user(scope, user_id)
    return dispatch(result)
