from fastapi import APIRouter, Depends, status

from school_api.core.dependencies import (
    get_auth_service,
    get_current_scope,
    get_user_service
)
from school_api.core.permissions import Scope
from school_api.core.responses import dispatch
from school_api.schemas import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    UserResponse
)
from school_api.services import AuthService, UserService

router = APIRouter(tags=["Authentication"])


@router.post("/login")
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Exchange email and password for a long-lived and a short-lived token"""
    result = await auth_service.login(request.email, request.password)
    return dispatch(result, LoginResponse)

@router.post("/refresh")
async def refresh_token(
    request: RefreshRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    result = await auth_service.refresh(request.long_token)
    return dispatch(result, RefreshResponse)

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    scope: Scope = Depends(get_current_scope),
    user_service: UserService = Depends(get_user_service)
):
    """Create an administrator account (superadmin only)"""
    result = await user_service.register(
        scope,
        username=request.username,
        email=request.email,
        password=request.password,
        role=request.role,
        school_id=request.school_id,
    )
    return dispatch(result, UserResponse, status_code=status.HTTP_201_CREATED)

@router.get("/me")
async def get_me(
    scope: Scope = Depends(get_current_scope),
    auth_service: AuthService = Depends(get_auth_service)
):
    result = await auth_service.get_profile(scope)
    return dispatch(result, UserResponse)
