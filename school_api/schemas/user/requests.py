from pydantic import EmailStr, Field, field_validator
from typing import Optional
from school_api.core.security import SecurityConfig
from ..common import CamelModel, EntityId
from .role import UserRoleEnum


class RegisterRequest(CamelModel):
    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(
        min_length=SecurityConfig.MIN_PASSWORD_LENGTH,
        max_length=SecurityConfig.MAX_PASSWORD_LENGTH,
    )
    role: UserRoleEnum = UserRoleEnum.SCHOOL_ADMIN  # school admins are the common case
    school_id: Optional[EntityId] = None  # required for school_admin

    @field_validator('username')
    @classmethod
    def strip_username(cls, v: str) -> str:
        return v.strip()

    @field_validator('email')
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    model_config = {
        "json_schema_extra": {
            "example": {
                "username": "greenwood_admin",
                "email": "admin@greenwood.edu",
                "password": "changeme123",
                "role": "school_admin",
                "schoolId": 1
            }
        }
    }
