from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType


class Role(StrEnum):
    """Coarse privilege class assigned to a principal.

    The set is closed. Values are matched exactly (case-sensitive) when
    parsed from token claims, so "admin" is not ADMIN.
    """

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"
    PARENT = "PARENT"


# Total privilege order used for "highest role" decisions.
# Priorities are strictly distinct, so ties cannot happen.
ROLE_PRIORITY: MappingProxyType[Role, int] = MappingProxyType(
    {
        Role.ADMIN: 4,
        Role.TEACHER: 3,
        Role.STUDENT: 2,
        Role.PARENT: 1,
    }
)


def parse_role(value: object) -> Role | None:
    """Return the Role whose value equals ``value`` exactly, else None."""
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Role(value)
    except ValueError:
        return None
