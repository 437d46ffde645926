from pydantic import EmailStr, Field, field_validator
from ..common import CamelModel


# Login Request Model - For logging in a user
class LoginRequest(CamelModel):
    email: EmailStr  # Email address
    password: str = Field(min_length=1)  # User's password

    @field_validator('email')
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

# Refresh Request Model - exchanges the long-lived token for a new short one
class RefreshRequest(CamelModel):
    long_token: str = Field(min_length=1)
