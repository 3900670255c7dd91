"""
Role-based authorization gate.

Every protected route declares a :class:`RoleRequirement` when it is
registered; :func:`authorize` is the single function that turns
(settings, caller, requirement) into an allow / 401 / 403 decision.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from app.core.config import Settings, is_auth_enabled
from app.core.security import Principal
from app.models.user import UserRole


class Decision(enum.Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"  # 401
    FORBIDDEN = "forbidden"  # 403


@dataclass(frozen=True)
class RoleRequirement:
    name: str
    allowed: frozenset[UserRole]

    def permits(self, role: UserRole) -> bool:
        return role in self.allowed


REQUIRE_JURY = RoleRequirement("RequireJury", frozenset({UserRole.JURY}))
REQUIRE_EMPLOYEE = RoleRequirement("RequireEmployee", frozenset({UserRole.EMPLOYEE}))
REQUIRE_JURY_OR_EMPLOYEE = RoleRequirement(
    "RequireJuryOrEmployee", frozenset({UserRole.JURY, UserRole.EMPLOYEE})
)


def parse_role_claim(value: str | None) -> UserRole | None:
    """Case-sensitive match against the enum names; ``None`` when unusable."""
    if not value:
        return None
    try:
        return UserRole(value)
    except ValueError:
        return None


def authorize(
    config: Settings,
    principal: Principal | None,
    requirement: RoleRequirement,
) -> Decision:
    if not is_auth_enabled(config):
        return Decision.ALLOW
    if principal is None:
        return Decision.UNAUTHENTICATED
    role = parse_role_claim(principal.role)
    if role is None or not requirement.permits(role):
        return Decision.FORBIDDEN
    return Decision.ALLOW


def is_jury(principal: Principal | None) -> bool:
    return principal is not None and parse_role_claim(principal.role) is UserRole.JURY


def is_employee(principal: Principal | None) -> bool:
    return principal is not None and parse_role_claim(principal.role) is UserRole.EMPLOYEE
