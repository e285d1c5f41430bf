"""Access decision engine.

Pure predicates over a Principal snapshot and the policy tables in
``campus_access.core.policy``. Nothing here does I/O, logs, caches, or
keeps state between calls, so every function is safe to call from any
number of concurrent requests.

Denial is an ordinary return value. Absent principals, empty role sets
and malformed fields (e.g. ``roles`` that is not a set) all fail closed:
the predicate returns False, ``get_highest_role`` returns None.

ADMIN is a universal override: it satisfies every capability and every
ownership check below.
"""

from __future__ import annotations

from collections.abc import Iterable

from campus_access.core.policy import (
    CAPABILITY_ROLES,
    NAVIGATION,
    Capability,
    NavItem,
    RouteDecision,
)
from campus_access.models.principal import Principal
from campus_access.models.role import ROLE_PRIORITY, Role


def _roles_of(principal: Principal | None) -> frozenset | None:
    # None means "no usable role set": absent principal or malformed field.
    if principal is None:
        return None
    roles = getattr(principal, "roles", None)
    if not isinstance(roles, (set, frozenset)):
        return None
    return roles


def _contains(container: frozenset, item: object) -> bool:
    try:
        return item in container
    except TypeError:  # unhashable
        return False


def _wanted(roles: Iterable[Role] | None) -> list[Role] | None:
    if roles is None or isinstance(roles, (str, bytes)):
        return None
    try:
        return list(roles)
    except TypeError:
        return None


# ---------------------------------------------------------------------------
# Role membership
# ---------------------------------------------------------------------------


def has_role(principal: Principal | None, role: Role) -> bool:
    roles = _roles_of(principal)
    if roles is None:
        return False
    return _contains(roles, role)


def has_any_role(principal: Principal | None, roles: Iterable[Role]) -> bool:
    """True iff the principal holds at least one of ``roles``.

    An empty ``roles`` argument is always False.
    """
    held = _roles_of(principal)
    wanted = _wanted(roles)
    if held is None or wanted is None:
        return False
    return any(_contains(held, role) for role in wanted)


def has_all_roles(principal: Principal | None, roles: Iterable[Role]) -> bool:
    """True iff the principal holds every one of ``roles``.

    An empty ``roles`` argument is vacuously True for any principal with a
    well-formed role set (including an empty one). An absent principal is
    still False.
    """
    held = _roles_of(principal)
    wanted = _wanted(roles)
    if held is None or wanted is None:
        return False
    return all(_contains(held, role) for role in wanted)


def is_admin(principal: Principal | None) -> bool:
    return has_role(principal, Role.ADMIN)


def is_teacher(principal: Principal | None) -> bool:
    return has_role(principal, Role.TEACHER)


def is_student(principal: Principal | None) -> bool:
    return has_role(principal, Role.STUDENT)


def is_parent(principal: Principal | None) -> bool:
    return has_role(principal, Role.PARENT)


def get_highest_role(principal: Principal | None) -> Role | None:
    """Return the held role with the greatest priority, or None."""
    roles = _roles_of(principal)
    if not roles:
        return None
    ranked = [r for r in roles if r in ROLE_PRIORITY]
    if not ranked:
        return None
    return Role(max(ranked, key=ROLE_PRIORITY.__getitem__))


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------


def has_capability(principal: Principal | None, capability: Capability) -> bool:
    allowed = CAPABILITY_ROLES.get(capability)
    if allowed is None:
        return False
    return has_any_role(principal, allowed)


def capabilities_for(principal: Principal | None) -> frozenset[Capability]:
    return frozenset(c for c in CAPABILITY_ROLES if has_capability(principal, c))


def can_access_admin(principal: Principal | None) -> bool:
    return has_capability(principal, Capability.ACCESS_ADMIN)


def can_manage_courses(principal: Principal | None) -> bool:
    return has_capability(principal, Capability.MANAGE_COURSES)


def can_create_assignments(principal: Principal | None) -> bool:
    return has_capability(principal, Capability.CREATE_ASSIGNMENTS)


def can_grade_submissions(principal: Principal | None) -> bool:
    return has_capability(principal, Capability.GRADE_SUBMISSIONS)


def can_manage_enrollments(principal: Principal | None) -> bool:
    return has_capability(principal, Capability.MANAGE_ENROLLMENTS)


def can_view_audit_logs(principal: Principal | None) -> bool:
    return has_capability(principal, Capability.VIEW_AUDIT_LOGS)


def can_view_course_content(principal: Principal | None) -> bool:
    return has_capability(principal, Capability.VIEW_COURSE_CONTENT)


# ---------------------------------------------------------------------------
# Ownership
# ---------------------------------------------------------------------------


def _is_owner(principal: Principal, owner_id: object) -> bool:
    principal_id = getattr(principal, "id", None)
    return principal_id is not None and principal_id == owner_id


def can_access_resource(
    principal: Principal | None,
    resource_owner_id: str,
    required_roles: Iterable[Role] = (),
) -> bool:
    """Owner-or-admin check, optionally narrowed by a role requirement.

    Evaluated in order:
      1. absent principal (or one without a usable role set) -> False
      2. ``required_roles`` given and none held -> False
      3. ADMIN -> True
      4. principal id equals ``resource_owner_id`` -> True
      5. otherwise False
    """
    if principal is None or _roles_of(principal) is None:
        return False
    required = _wanted(required_roles)
    if required is None:
        return False
    if required and not has_any_role(principal, required):
        return False
    if is_admin(principal):
        return True
    return _is_owner(principal, resource_owner_id)


def can_teacher_access_course(
    principal: Principal | None,
    course_teacher_id: str,
) -> bool:
    """Admins, or the TEACHER whose id is the course's teacher id.

    Matching ids alone are not enough; the TEACHER role is required too.
    """
    if principal is None:
        return False
    if is_admin(principal):
        return True
    return is_teacher(principal) and _is_owner(principal, course_teacher_id)


def can_parent_access_student(
    principal: Principal | None,
    student_id: str,
) -> bool:
    """Admins, or a PARENT linked to ``student_id``."""
    if principal is None:
        return False
    if is_admin(principal):
        return True
    if not is_parent(principal):
        return False
    linked = getattr(principal, "owned_student_ids", None)
    if not isinstance(linked, (set, frozenset)):
        return False
    return _contains(linked, student_id)


# ---------------------------------------------------------------------------
# Navigation and routing
# ---------------------------------------------------------------------------


def visible_navigation(principal: Principal | None) -> list[NavItem]:
    return [item for item in NAVIGATION if has_any_role(principal, item.roles)]


def route_decision(
    principal: Principal | None,
    roles: Iterable[Role],
) -> RouteDecision:
    """Routing guard: where to send a principal asking for a role-gated view."""
    if principal is None:
        return RouteDecision.REDIRECT_LOGIN
    if not has_any_role(principal, roles):
        return RouteDecision.REDIRECT_FALLBACK
    return RouteDecision.ALLOW
