from .base import Base, TenantModel, TimestampMixin
from .school import School
from .classroom import Classroom
from .student import Student
from .user import User

__all__ = [
    'Base',
    'TenantModel',
    'TimestampMixin',
    'School',
    'Classroom',
    'Student',
    'User',
]
