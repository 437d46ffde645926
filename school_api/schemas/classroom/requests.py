from pydantic import Field, PositiveInt, field_validator
from typing import List, Optional
from ..common import CamelModel, EntityId


def _clean_resources(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is None:
        return v
    cleaned = []
    for tag in v:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned

class ClassroomCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    school_id: Optional[EntityId] = None  # ignored for school admins
    capacity: PositiveInt
    resources: List[str] = Field(default_factory=list)  # e.g. ["projector", "whiteboard"]

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    clean_resources = field_validator('resources')(_clean_resources)

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Room 101",
                "schoolId": 1,
                "capacity": 30,
                "resources": ["projector", "whiteboard"]
            }
        }
    }

class ClassroomUpdateRequest(CamelModel):
    # The owning school is fixed at creation and is not accepted here
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    capacity: Optional[PositiveInt] = None
    resources: Optional[List[str]] = None

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    clean_resources = field_validator('resources')(_clean_resources)
