from datetime import datetime
from typing import List, Optional
from ..common import CamelModel, SchoolRef


class ClassroomResponse(CamelModel):
    id: int
    name: str
    school_id: int
    school: Optional[SchoolRef] = None
    capacity: int
    resources: List[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime
