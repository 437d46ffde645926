# school_api/schemas/school/__init__.py
from .requests import SchoolCreateRequest, SchoolUpdateRequest
from .responses import SchoolResponse

__all__ = [
    'SchoolCreateRequest',
    'SchoolUpdateRequest',
    'SchoolResponse',
]
