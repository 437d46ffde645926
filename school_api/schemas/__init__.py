# school_api/schemas/__init__.py

# Import common schemas
from .common import CamelModel, SchoolRef, ClassroomRef, Envelope

# Import auth schemas
from .auth import LoginRequest, RefreshRequest, LoginResponse, RefreshResponse

# Import user schemas
from .user import UserRoleEnum, RegisterRequest, UserResponse

# Import entity schemas
from .school import SchoolCreateRequest, SchoolUpdateRequest, SchoolResponse
from .classroom import ClassroomCreateRequest, ClassroomUpdateRequest, ClassroomResponse
from .student import (
    StudentCreateRequest,
    StudentUpdateRequest,
    StudentTransferRequest,
    StudentResponse
)

__all__ = [
    'CamelModel',
    'SchoolRef',
    'ClassroomRef',
    'Envelope',
    'LoginRequest',
    'RefreshRequest',
    'LoginResponse',
    'RefreshResponse',
    'UserRoleEnum',
    'RegisterRequest',
    'UserResponse',
    'SchoolCreateRequest',
    'SchoolUpdateRequest',
    'SchoolResponse',
    'ClassroomCreateRequest',
    'ClassroomUpdateRequest',
    'ClassroomResponse',
    'StudentCreateRequest',
    'StudentUpdateRequest',
    'StudentTransferRequest',
    'StudentResponse',
]
