from .requests import ClassroomCreateRequest, ClassroomUpdateRequest
from .responses import ClassroomResponse

__all__ = [
    'ClassroomCreateRequest',
    'ClassroomUpdateRequest',
    'ClassroomResponse',
]
