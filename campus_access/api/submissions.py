from __future__ import annotations

import datetime
import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from campus_access.api.access import (
    check_student_record_access,
    check_teacher_course_access,
)
from campus_access.api.courses import ASSIGNMENTS, COURSES, SUBMISSIONS
from campus_access.api.dependencies import (
    require_capability,
    require_role,
    require_user,
)
from campus_access.core.policy import Capability
from campus_access.models.principal import Principal
from campus_access.models.role import Role
from campus_access.services import access_engine, audit_log

logger = logging.getLogger(__name__)

router = APIRouter(tags=["submissions"])


class SubmissionIn(BaseModel):
    files: list[str] = Field(default_factory=list)


class GradeIn(BaseModel):
    score: int = Field(ge=0)
    feedback: str = ""


class SubmissionOut(BaseModel):
    id: str
    assignment_id: str
    student_id: str
    files: list[str]
    submitted_at: int
    status: str
    score: int | None = None
    feedback: str | None = None
    graded_by: str | None = None
    graded_at: int | None = None


def _now() -> int:
    return int(datetime.datetime.now(datetime.UTC).timestamp())


@router.post(
    "/v1/assignments/{assignment_id}/submissions",
    response_model=SubmissionOut,
    status_code=status.HTTP_201_CREATED,
)
def submit_assignment(
    assignment_id: str,
    payload: SubmissionIn,
    principal: Annotated[Principal, Depends(require_role(Role.STUDENT))],
) -> SubmissionOut:
    assignment = ASSIGNMENTS.get(assignment_id)
    if assignment is None or assignment["course_id"] not in COURSES:
        raise HTTPException(status_code=404, detail="assignment not found")

    for existing in SUBMISSIONS.values():
        if (
            existing["assignment_id"] == assignment_id
            and existing["student_id"] == principal.id
        ):
            raise HTTPException(status_code=409, detail="already submitted")

    submission_id = str(uuid.uuid4())
    SUBMISSIONS[submission_id] = {
        "id": submission_id,
        "assignment_id": assignment_id,
        "student_id": principal.id,
        "files": payload.files,
        "submitted_at": _now(),
        "status": "SUBMITTED",
    }
    audit_log.record(
        actor_id=principal.id,
        action="submit",
        resource_type="submission",
        resource_id=submission_id,
    )
    return SubmissionOut(**SUBMISSIONS[submission_id])


@router.put("/v1/submissions/{submission_id}/grade", response_model=SubmissionOut)
def grade_submission(
    submission_id: str,
    payload: GradeIn,
    principal: Annotated[
        Principal, Depends(require_capability(Capability.GRADE_SUBMISSIONS))
    ],
) -> SubmissionOut:
    submission = SUBMISSIONS.get(submission_id)
    if submission is None:
        raise HTTPException(status_code=404, detail="submission not found")

    assignment = ASSIGNMENTS.get(submission["assignment_id"])
    course = COURSES.get(assignment["course_id"]) if assignment else None
    if course is None:
        raise HTTPException(status_code=404, detail="course not found")
    check_teacher_course_access(principal, course["teacher_id"])

    if payload.score > assignment["max_points"]:
        raise HTTPException(
            status_code=422,
            detail=f"score exceeds max_points ({assignment['max_points']})",
        )

    submission.update(
        score=payload.score,
        feedback=payload.feedback,
        graded_by=principal.id,
        graded_at=_now(),
        status="GRADED",
    )
    audit_log.record(
        actor_id=principal.id,
        action="grade",
        resource_type="submission",
        resource_id=submission_id,
    )
    return SubmissionOut(**submission)


@router.get(
    "/v1/students/{student_id}/submissions",
    response_model=list[SubmissionOut],
)
def list_student_submissions(
    student_id: str,
    principal: Annotated[Principal, Depends(require_user)],
) -> list[SubmissionOut]:
    check_student_record_access(principal, student_id)
    return [
        SubmissionOut(**s)
        for s in SUBMISSIONS.values()
        if s["student_id"] == student_id
    ]


@router.get(
    "/v1/assignments/{assignment_id}/submissions",
    response_model=list[SubmissionOut],
)
def list_assignment_submissions(
    assignment_id: str,
    principal: Annotated[Principal, Depends(require_user)],
) -> list[SubmissionOut]:
    """Submissions for one assignment, narrowed to what the caller may see.

    Grading staff who may manage the course see every submission, a
    student sees only their own, and anyone else gets an empty list.
    """
    assignment = ASSIGNMENTS.get(assignment_id)
    course = COURSES.get(assignment["course_id"]) if assignment else None
    if course is None:
        raise HTTPException(status_code=404, detail="assignment not found")

    rows = [s for s in SUBMISSIONS.values() if s["assignment_id"] == assignment_id]
    if access_engine.can_grade_submissions(
        principal
    ) and access_engine.can_teacher_access_course(principal, course["teacher_id"]):
        return [SubmissionOut(**s) for s in rows]
    if access_engine.is_student(principal):
        return [SubmissionOut(**s) for s in rows if s["student_id"] == principal.id]

    logger.debug(
        "No submissions visible to user=%s for assignment=%s",
        principal.id,
        assignment_id,
    )
    return []


@router.get("/v1/submissions/me", response_model=list[SubmissionOut])
def list_my_submissions(
    principal: Annotated[Principal, Depends(require_user)],
) -> list[SubmissionOut]:
    return [
        SubmissionOut(**s)
        for s in SUBMISSIONS.values()
        if s["student_id"] == principal.id
    ]
