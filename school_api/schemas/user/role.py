# school_api/schemas/user/role.py
from enum import Enum


class UserRoleEnum(str, Enum):
    SUPERADMIN = "superadmin"
    SCHOOL_ADMIN = "school_admin"

    @property
    def is_school_scoped(self) -> bool:
        return self is UserRoleEnum.SCHOOL_ADMIN
