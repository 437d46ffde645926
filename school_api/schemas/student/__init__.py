from .requests import StudentCreateRequest, StudentUpdateRequest, StudentTransferRequest
from .responses import StudentResponse

__all__ = [
    'StudentCreateRequest',
    'StudentUpdateRequest',
    'StudentTransferRequest',
    'StudentResponse',
]
