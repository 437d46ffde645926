# school_api/schemas/user/responses.py
from datetime import datetime
from typing import Optional
from ..common import CamelModel
from .role import UserRoleEnum


class UserResponse(CamelModel):
    # password_hash is deliberately absent
    id: int
    username: str
    email: str
    role: UserRoleEnum
    school_id: Optional[int] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
