"""Explicit actor context for request handlers.

Authentication happens upstream; the gateway forwards the authenticated
staff member and roles as headers. Handlers build an ``ActorContext`` from
them and pass it into every query that depends on who is asking, instead of
reading identity from ambient state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from fastapi import Header

from .config import get_settings
from .exceptions import PermissionError, ValidationError


ACTOR_ID_HEADER = "X-Actor-Id"
ACTOR_ROLES_HEADER = "X-Actor-Roles"


@dataclass(frozen=True)
class ActorContext:
    """The staff member (if any) and roles behind a request."""

    staff_member_id: Optional[int] = None
    roles: FrozenSet[str] = field(default_factory=frozenset)

    def has_role(self, role: str) -> bool:
        """Return ``True`` if the actor currently holds the specified role."""
        return role in self.roles

    def has_any_role(self, roles: Iterable[str]) -> bool:
        return any(role in self.roles for role in roles)

    @property
    def is_payroll_admin(self) -> bool:
        return self.has_any_role(get_settings().payroll_admin_roles)

    def can_view_staff(self, staff_member_id: int) -> bool:
        """Admins see everyone; other actors only see themselves."""
        return self.is_payroll_admin or self.staff_member_id == staff_member_id


def parse_roles(raw: Optional[str]) -> FrozenSet[str]:
    if not raw:
        return frozenset()
    return frozenset(role.strip().lower() for role in raw.split(",") if role.strip())


def get_actor_context(
    x_actor_id: Optional[str] = Header(None, alias=ACTOR_ID_HEADER),
    x_actor_roles: Optional[str] = Header(None, alias=ACTOR_ROLES_HEADER),
) -> ActorContext:
    """FastAPI dependency building the actor from the forwarded headers."""
    staff_member_id = None
    if x_actor_id:
        try:
            staff_member_id = int(x_actor_id)
        except ValueError:
            raise ValidationError(
                f"{ACTOR_ID_HEADER} must be an integer staff member id",
                error_code="INVALID_ACTOR",
            )
    return ActorContext(staff_member_id=staff_member_id, roles=parse_roles(x_actor_roles))


def require_payroll_admin(
    x_actor_id: Optional[str] = Header(None, alias=ACTOR_ID_HEADER),
    x_actor_roles: Optional[str] = Header(None, alias=ACTOR_ROLES_HEADER),
) -> ActorContext:
    """Dependency for endpoints that run or settle payroll."""
    actor = get_actor_context(x_actor_id, x_actor_roles)
    if not actor.is_payroll_admin:
        raise PermissionError("Payroll administration role required")
    return actor
