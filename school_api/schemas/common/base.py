# school_api/schemas/common/base.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Annotated, Any, Optional


# Primary keys are 32-bit integer columns
MAX_ID = 2**31 - 1

EntityId = Annotated[int, Field(ge=1, le=MAX_ID)]


class CamelModel(BaseModel):
    """Fields are snake_case in Python and camelCase on the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

# Minimal projections used when expanding references
class SchoolRef(CamelModel):
    id: int
    name: str

class ClassroomRef(CamelModel):
    id: int
    name: str

class Envelope(BaseModel):
    """Uniform response body for every endpoint"""
    ok: bool
    data: Optional[Any] = None
    errors: Optional[str] = None
    message: str
