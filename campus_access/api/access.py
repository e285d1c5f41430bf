"""Ownership and resource-level access checks.

These are plain functions (not FastAPI dependencies) because they need
both the Principal and a resource identifier that is usually only known
after a lookup. Call them at the top of an endpoint body, after the
resource has been loaded.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from campus_access.api.dependencies import forbid
from campus_access.models.principal import Principal
from campus_access.models.role import Role
from campus_access.services import access_engine

logger = logging.getLogger(__name__)


def check_resource_access(
    principal: Principal,
    resource_owner_id: str,
    required_roles: Iterable[Role] = (),
) -> None:
    """Raise 403 unless the principal owns the resource or is an admin."""
    if access_engine.can_access_resource(principal, resource_owner_id, required_roles):
        return
    logger.warning(
        "Access denied: user=%s is not owner=%s",
        principal.id,
        resource_owner_id,
        extra={"user_id": principal.id, "guard": "owner"},
    )
    raise forbid("owner", "You can only access your own resource")


def check_teacher_course_access(principal: Principal, course_teacher_id: str) -> None:
    """Raise 403 unless the principal teaches the course or is an admin."""
    if access_engine.can_teacher_access_course(principal, course_teacher_id):
        return
    logger.warning(
        "Access denied: user=%s does not teach course owned by %s",
        principal.id,
        course_teacher_id,
        extra={"user_id": principal.id, "guard": "teacher_course"},
    )
    raise forbid("teacher_course", "You can only manage your own courses")


def check_student_record_access(principal: Principal, student_id: str) -> None:
    # Raise 403 unless the principal is the student, a linked parent,
    # staff who can grade, or an admin
    if access_engine.can_access_resource(principal, student_id):
        return
    if access_engine.can_parent_access_student(principal, student_id):
        return
    if access_engine.can_grade_submissions(principal):
        return
    logger.warning(
        "Access denied: user=%s cannot view student=%s",
        principal.id,
        student_id,
        extra={"user_id": principal.id, "guard": "student_record"},
    )
    raise forbid("student_record", "Not linked to this student")
