from .auth import router as auth_router
from .schools import router as schools_router
from .classrooms import router as classrooms_router
from .students import router as students_router
from .users import router as users_router


__all__ = [
    "auth_router",
    "schools_router",
    "classrooms_router",
    "students_router",
    "users_router",
]
