"""Access policy tables.

Every role-gated decision in the service reads from the tables here.
They are process-wide, read-only constants built once at import; change
a capability's allowed roles by editing ``CAPABILITY_ROLES`` and nothing
else.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from campus_access.models.role import Role


class Capability(StrEnum):
    ACCESS_ADMIN = "access_admin"
    MANAGE_COURSES = "manage_courses"
    CREATE_ASSIGNMENTS = "create_assignments"
    GRADE_SUBMISSIONS = "grade_submissions"
    MANAGE_ENROLLMENTS = "manage_enrollments"
    VIEW_AUDIT_LOGS = "view_audit_logs"
    VIEW_COURSE_CONTENT = "view_course_content"


_STAFF = frozenset({Role.ADMIN, Role.TEACHER})
_EVERYONE = frozenset(Role)

CAPABILITY_ROLES: MappingProxyType[Capability, frozenset[Role]] = MappingProxyType(
    {
        Capability.ACCESS_ADMIN: frozenset({Role.ADMIN}),
        Capability.MANAGE_COURSES: _STAFF,
        Capability.CREATE_ASSIGNMENTS: _STAFF,
        Capability.GRADE_SUBMISSIONS: _STAFF,
        Capability.MANAGE_ENROLLMENTS: _STAFF,
        Capability.VIEW_AUDIT_LOGS: _STAFF,
        Capability.VIEW_COURSE_CONTENT: _EVERYONE,
    }
)


# ---------------------------------------------------------------------------
# Navigation and routing
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NavItem:
    name: str
    href: str
    roles: frozenset[Role]


# Order is display order.
NAVIGATION: tuple[NavItem, ...] = (
    NavItem("Dashboard", "/dashboard", _EVERYONE),
    NavItem("Courses", "/courses", _EVERYONE),
    NavItem("Assignments", "/assignments", _EVERYONE),
    NavItem("Users", "/admin/users", frozenset({Role.ADMIN})),
    NavItem("Analytics", "/admin/analytics", _STAFF),
    NavItem("Settings", "/settings", _EVERYONE),
)


class RouteDecision(StrEnum):
    ALLOW = "allow"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_FALLBACK = "redirect_fallback"


LOGIN_PATH = "/auth"
FALLBACK_PATH = "/dashboard"
