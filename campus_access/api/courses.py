"""Course, assignment and enrollment endpoints.

Course-level mutations need both the capability (from the policy table)
and ownership of the course: a teacher may only change courses they
teach, admins may change any.
"""

from __future__ import annotations

import datetime
import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from campus_access.api.access import check_teacher_course_access
from campus_access.api.dependencies import require_capability
from campus_access.core.policy import Capability
from campus_access.models.principal import Principal
from campus_access.services import access_engine, audit_log

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/courses", tags=["courses"])


class CourseOut(BaseModel):
    id: str
    code: str
    title: str
    term: str
    teacher_id: str


class CourseIn(BaseModel):
    code: str = Field(min_length=1)
    title: str = Field(min_length=1)
    term: str = ""
    # Only honored for admins; teachers always own what they create.
    teacher_id: str | None = None


class CourseUpdateIn(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    term: str | None = None


class AssignmentIn(BaseModel):
    title: str = Field(min_length=1)
    instructions: str = ""
    max_points: int = Field(default=100, gt=0)


class AssignmentOut(BaseModel):
    id: str
    course_id: str
    title: str
    instructions: str
    max_points: int


class EnrollmentIn(BaseModel):
    student_id: str = Field(min_length=1)


class EnrollmentOut(BaseModel):
    course_id: str
    student_id: str
    status: str
    enrolled_at: int


# --- In-memory store ---

COURSES: dict[str, dict] = {}
ASSIGNMENTS: dict[str, dict] = {}
ENROLLMENTS: dict[str, dict] = {}  # key: "{course_id}:{student_id}"
SUBMISSIONS: dict[str, dict] = {}

SAMPLE_COURSE_ID = "00000000-0000-0000-0000-000000000001"
SAMPLE_TEACHER_ID = "teacher-1"


def seed_sample_course() -> None:
    """Seed a sample course for development/testing."""
    if not COURSES:
        COURSES[SAMPLE_COURSE_ID] = {
            "id": SAMPLE_COURSE_ID,
            "code": "MATH101",
            "title": "Linear Algebra",
            "term": "2026-fall",
            "teacher_id": SAMPLE_TEACHER_ID,
        }


seed_sample_course()


def _get_course(course_id: str) -> dict:
    course = COURSES.get(course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="course not found")
    return course


def _drop_course_records(course_id: str) -> None:
    """Remove a deleted course's assignments, enrollments and submissions."""
    assignment_ids = {
        a_id for a_id, a in ASSIGNMENTS.items() if a["course_id"] == course_id
    }
    for a_id in assignment_ids:
        del ASSIGNMENTS[a_id]
    for key in [k for k, e in ENROLLMENTS.items() if e["course_id"] == course_id]:
        del ENROLLMENTS[key]
    for s_id in [
        s_id
        for s_id, s in SUBMISSIONS.items()
        if s["assignment_id"] in assignment_ids
    ]:
        del SUBMISSIONS[s_id]
    logger.info(
        "Course %s removed with %d assignment(s)", course_id, len(assignment_ids)
    )


@router.get("", response_model=list[CourseOut])
def list_courses(
    _principal: Annotated[
        Principal, Depends(require_capability(Capability.VIEW_COURSE_CONTENT))
    ],
) -> list[CourseOut]:
    return [CourseOut(**c) for c in COURSES.values()]


@router.post("", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
def create_course(
    payload: CourseIn,
    principal: Annotated[
        Principal, Depends(require_capability(Capability.MANAGE_COURSES))
    ],
) -> CourseOut:
    teacher_id = principal.id
    if payload.teacher_id and access_engine.is_admin(principal):
        teacher_id = payload.teacher_id

    course_id = str(uuid.uuid4())
    COURSES[course_id] = {
        "id": course_id,
        "code": payload.code,
        "title": payload.title,
        "term": payload.term,
        "teacher_id": teacher_id,
    }
    audit_log.record(
        actor_id=principal.id,
        action="create",
        resource_type="course",
        resource_id=course_id,
    )
    return CourseOut(**COURSES[course_id])


@router.put("/{course_id}", response_model=CourseOut)
def update_course(
    course_id: str,
    payload: CourseUpdateIn,
    principal: Annotated[
        Principal, Depends(require_capability(Capability.MANAGE_COURSES))
    ],
) -> CourseOut:
    course = _get_course(course_id)
    check_teacher_course_access(principal, course["teacher_id"])

    if payload.title is not None:
        course["title"] = payload.title
    if payload.term is not None:
        course["term"] = payload.term

    audit_log.record(
        actor_id=principal.id,
        action="update",
        resource_type="course",
        resource_id=course_id,
    )
    return CourseOut(**course)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course(
    course_id: str,
    principal: Annotated[
        Principal, Depends(require_capability(Capability.ACCESS_ADMIN))
    ],
) -> None:
    _get_course(course_id)
    del COURSES[course_id]
    _drop_course_records(course_id)
    audit_log.record(
        actor_id=principal.id,
        action="delete",
        resource_type="course",
        resource_id=course_id,
    )


@router.post(
    "/{course_id}/assignments",
    response_model=AssignmentOut,
    status_code=status.HTTP_201_CREATED,
)
def create_assignment(
    course_id: str,
    payload: AssignmentIn,
    principal: Annotated[
        Principal, Depends(require_capability(Capability.CREATE_ASSIGNMENTS))
    ],
) -> AssignmentOut:
    course = _get_course(course_id)
    check_teacher_course_access(principal, course["teacher_id"])

    assignment_id = str(uuid.uuid4())
    ASSIGNMENTS[assignment_id] = {
        "id": assignment_id,
        "course_id": course_id,
        "title": payload.title,
        "instructions": payload.instructions,
        "max_points": payload.max_points,
    }
    audit_log.record(
        actor_id=principal.id,
        action="create",
        resource_type="assignment",
        resource_id=assignment_id,
    )
    return AssignmentOut(**ASSIGNMENTS[assignment_id])


@router.post(
    "/{course_id}/enrollments",
    response_model=EnrollmentOut,
    status_code=status.HTTP_201_CREATED,
)
def enroll_student(
    course_id: str,
    payload: EnrollmentIn,
    principal: Annotated[
        Principal, Depends(require_capability(Capability.MANAGE_ENROLLMENTS))
    ],
) -> EnrollmentOut:
    course = _get_course(course_id)
    check_teacher_course_access(principal, course["teacher_id"])

    key = f"{course_id}:{payload.student_id}"
    if key in ENROLLMENTS:
        raise HTTPException(status_code=409, detail="already enrolled")

    ENROLLMENTS[key] = {
        "course_id": course_id,
        "student_id": payload.student_id,
        "status": "ACTIVE",
        "enrolled_at": int(datetime.datetime.now(datetime.UTC).timestamp()),
    }
    audit_log.record(
        actor_id=principal.id,
        action="enroll",
        resource_type="enrollment",
        resource_id=key,
    )
    return EnrollmentOut(**ENROLLMENTS[key])
