from pydantic import EmailStr, Field, field_validator
from typing import Optional
from ..common import CamelModel


class SchoolCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    website: Optional[str] = Field(None, max_length=255)

    @field_validator('name', 'address')
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator('email')
    @classmethod
    def lower_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Greenwood High",
                "address": "12 Elm Street, Springfield",
                "phone": "+15550100",
                "email": "office@greenwood.edu",
                "website": "https://greenwood.edu"
            }
        }
    }

class SchoolUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    website: Optional[str] = Field(None, max_length=255)

    @field_validator('name', 'address')
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator('email')
    @classmethod
    def lower_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v
