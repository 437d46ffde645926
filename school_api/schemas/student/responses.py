from datetime import date, datetime
from typing import Optional
from ..common import CamelModel, SchoolRef, ClassroomRef


class StudentResponse(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    date_of_birth: Optional[date] = None
    school_id: int
    classroom_id: Optional[int] = None
    school: Optional[SchoolRef] = None
    classroom: Optional[ClassroomRef] = None
    is_enrolled: bool
    created_at: datetime
    updated_at: datetime
