from .base_service import ServiceResult, Page
from .auth_service import AuthService
from .user_service import UserService
from .school_service import SchoolService
from .classroom_service import ClassroomService
from .student_service import StudentService
from .transfer_service import TransferService

__all__ = [
    "ServiceResult",
    "Page",
    "AuthService",
    "UserService",
    "SchoolService",
    "ClassroomService",
    "StudentService",
    "TransferService",
]
