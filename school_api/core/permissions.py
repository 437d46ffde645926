# school_api/core/permissions.py
"""Authorization gate.

A :class:`Scope` is derived once per request from the verified token claims
and handed to every entity service. Services call
:meth:`Scope.effective_school_id` at the top of each operation instead of
reading a school id from the request directly:

* a ``school_admin`` is always pinned to the school in their credential, and
  any school id they send is ignored;
* a ``superadmin`` gets exactly what they asked for, and ``None`` means
  "every school".
"""
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from school_api.core.errors import PermissionDenied, TokenError
from school_api.schemas.user.role import UserRoleEnum

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scope:
    role: UserRoleEnum
    school_id: Optional[int] = None
    user_id: Optional[int] = None

    @property
    def is_superadmin(self) -> bool:
        return self.role is UserRoleEnum.SUPERADMIN

    def effective_school_id(self, requested: Optional[int] = None) -> Optional[int]:
        """Resolve the school a call operates on"""
        if self.role.is_school_scoped:
            if requested is not None and requested != self.school_id:
                logger.debug(
                    f"Ignoring school id {requested} supplied by school_admin {self.user_id}"
                )
            return self.school_id
        return requested

    def deny_unless_superadmin(self) -> Optional[PermissionDenied]:
        """Return the error for a non-superadmin caller, None otherwise"""
        if self.is_superadmin:
            return None
        logger.warning(
            f"Permission denied: user {self.user_id} with role {self.role.value} "
            f"attempted a superadmin-only operation"
        )
        return PermissionDenied()

    def require_superadmin(self) -> None:
        denied = self.deny_unless_superadmin()
        if denied:
            raise denied


def _as_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise TokenError("Token carries a malformed identifier")


def resolve_scope(claims: Mapping[str, Any]) -> Scope:
    """Build the caller's scope from a verified claim set"""
    try:
        role = UserRoleEnum(claims.get("role"))
    except ValueError:
        raise TokenError("Token carries an unknown role")

    school_id = _as_int(claims.get("schoolId"))
    if role.is_school_scoped and school_id is None:
        # A school_admin without a school would otherwise fall through to
        # the unscoped superadmin view.
        raise TokenError("School administrator token has no school")

    return Scope(
        role=role,
        school_id=school_id if role.is_school_scoped else None,
        user_id=_as_int(claims.get("userId")),
    )
