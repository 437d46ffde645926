from .role import UserRoleEnum
from .requests import RegisterRequest
from .responses import UserResponse

__all__ = [
    'UserRoleEnum',
    'RegisterRequest',
    'UserResponse',
]
