from .requests import LoginRequest, RefreshRequest
from .responses import LoginResponse, RefreshResponse

__all__ = [
    'LoginRequest',
    'RefreshRequest',
    'LoginResponse',
    'RefreshResponse',
]
