from datetime import datetime
from typing import Optional
from ..common import CamelModel


class SchoolResponse(CamelModel):
    id: int
    name: str
    address: str
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
