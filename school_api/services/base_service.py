# school_api/services/base_service.py
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from school_api.core.errors import BaseAPIError, ConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20


@dataclass
class ServiceResult(Generic[T]):
    """Outcome of a service call.

    Expected failures (not found, conflict, ...) travel back as ``error``;
    only unexpected failures are raised.
    """
    data: Optional[T] = None
    error: Optional[BaseAPIError] = None
    message: str = "success"

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: Any = None, message: str = "success") -> "ServiceResult":
        return cls(data=data, message=message)

    @classmethod
    def fail(cls, error: BaseAPIError) -> "ServiceResult":
        return cls(error=error, message=error.message)


@dataclass
class Page:
    """One page of a listing; ``key`` names the collection in the response"""
    key: str
    items: List[Any] = field(default_factory=list)
    total: int = 0
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def clean_partial(updates: Dict[str, Any], required: Iterable[str]) -> Dict[str, Any]:
    """Drop explicit nulls for columns that cannot be cleared"""
    required = set(required)
    return {
        key: value for key, value in updates.items()
        if not (key in required and value is None)
    }


class BaseService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def commit_or_conflict(self, conflict_message: str) -> Optional[ConflictError]:
        """Commit the unit of work.

        A unique-constraint violation raised by the database is rolled back
        and returned as a ConflictError. The pre-checks in the services only
        catch the common case; concurrent writers are caught here.
        """
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Constraint violation on commit: {e.orig}")
            return ConflictError(conflict_message)
        return None
