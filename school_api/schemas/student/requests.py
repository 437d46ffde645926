from pydantic import EmailStr, Field, field_validator
from datetime import date
from typing import Optional
from ..common import CamelModel, EntityId


def _strip_required(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v

class StudentCreateRequest(CamelModel):
    first_name: str = Field(..., max_length=100, description="Given name")
    last_name: str = Field(..., max_length=100, description="Family name")
    email: EmailStr = Field(..., description="Globally unique student email")
    date_of_birth: Optional[date] = Field(None, description="Date of birth")
    school_id: Optional[EntityId] = Field(None, description="Owning school; ignored for school admins")
    classroom_id: Optional[EntityId] = Field(None, description="Classroom in the owning school")

    strip_names = field_validator('first_name', 'last_name')(_strip_required)

    @field_validator('email')
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    model_config = {
        "json_schema_extra": {
            "example": {
                "firstName": "Alice",
                "lastName": "Walker",
                "email": "alice@x.com",
                "dateOfBirth": "2012-04-01",
                "schoolId": 1,
                "classroomId": 1
            }
        }
    }

class StudentUpdateRequest(CamelModel):
    # No school_id: a student changes school only through a transfer
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    date_of_birth: Optional[date] = None
    classroom_id: Optional[EntityId] = None

    strip_names = field_validator('first_name', 'last_name')(_strip_required)

    @field_validator('email')
    @classmethod
    def lower_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

class StudentTransferRequest(CamelModel):
    target_school_id: EntityId = Field(..., description="School receiving the student")
    target_classroom_id: Optional[EntityId] = Field(None, description="Classroom in the target school")
