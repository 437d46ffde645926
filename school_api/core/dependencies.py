from typing import Any, Dict
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from school_api.core.database import get_db
from school_api.core.errors import AuthenticationError
from school_api.core.permissions import Scope, resolve_scope
from school_api.services import (
    AuthService,
    UserService,
    SchoolService,
    ClassroomService,
    StudentService,
    TransferService,
)


# Service providers
async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)

async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)

async def get_school_service(db: AsyncSession = Depends(get_db)) -> SchoolService:
    return SchoolService(db)

async def get_classroom_service(db: AsyncSession = Depends(get_db)) -> ClassroomService:
    return ClassroomService(db)

async def get_student_service(db: AsyncSession = Depends(get_db)) -> StudentService:
    return StudentService(db)

async def get_transfer_service(db: AsyncSession = Depends(get_db)) -> TransferService:
    return TransferService(db)


# Caller identity, as established by AuthMiddleware
async def get_current_claims(request: Request) -> Dict[str, Any]:
    claims = getattr(request.state, "token_payload", None)
    if not claims:
        raise AuthenticationError("Authentication required")
    return claims

async def get_current_scope(
    request: Request,
    claims: Dict[str, Any] = Depends(get_current_claims)
) -> Scope:
    scope = getattr(request.state, "scope", None)
    if scope is None:
        scope = resolve_scope(claims)
    return scope

async def get_superadmin_scope(scope: Scope = Depends(get_current_scope)) -> Scope:
    """Reject anyone but a superadmin before the handler runs"""
    scope.require_superadmin()
    return scope
