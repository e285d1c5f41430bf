"""Tests for course, assignment and enrollment endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from campus_access.api import courses
from campus_access.api.courses import SAMPLE_COURSE_ID, SAMPLE_TEACHER_ID
from tests.conftest import auth

_COURSE = f"/v1/courses/{SAMPLE_COURSE_ID}"

# ---- list ----


def test_list_courses_returns_seeded_course(
    client: TestClient, parent_token: str
) -> None:
    resp = client.get("/v1/courses", headers=auth(parent_token))
    assert resp.status_code == 200
    ids = [c["id"] for c in resp.json()]
    assert SAMPLE_COURSE_ID in ids


# ---- create ----


def test_teacher_creates_course_they_own(
    client: TestClient, other_teacher_token: str
) -> None:
    resp = client.post(
        "/v1/courses",
        json={"code": "PHY1", "title": "Physics", "teacher_id": "someone-else"},
        headers=auth(other_teacher_token),
    )
    assert resp.status_code == 201
    # teacher_id in the body is ignored for non-admins
    assert resp.json()["teacher_id"] == "teacher-2"


def test_admin_assigns_course_teacher(client: TestClient, admin_token: str) -> None:
    resp = client.post(
        "/v1/courses",
        json={"code": "CHEM1", "title": "Chemistry", "teacher_id": "teacher-7"},
        headers=auth(admin_token),
    )
    assert resp.status_code == 201
    assert resp.json()["teacher_id"] == "teacher-7"


def test_create_course_rejects_empty_title(
    client: TestClient, teacher_token: str
) -> None:
    resp = client.post(
        "/v1/courses", json={"code": "X", "title": ""}, headers=auth(teacher_token)
    )
    assert resp.status_code == 422


def test_created_course_is_editable_by_creator(
    client: TestClient, other_teacher_token: str
) -> None:
    created = client.post(
        "/v1/courses",
        json={"code": "BIO1", "title": "Biology"},
        headers=auth(other_teacher_token),
    ).json()
    resp = client.put(
        f"/v1/courses/{created['id']}",
        json={"term": "2027-spring"},
        headers=auth(other_teacher_token),
    )
    assert resp.status_code == 200
    assert resp.json()["term"] == "2027-spring"
    assert resp.json()["title"] == "Biology"


# ---- delete ----


def test_admin_deletes_course(client: TestClient, admin_token: str) -> None:
    resp = client.delete(_COURSE, headers=auth(admin_token))
    assert resp.status_code == 204
    assert client.get("/v1/courses", headers=auth(admin_token)).json() == []


def test_delete_unknown_course_is_404(client: TestClient, admin_token: str) -> None:
    resp = client.delete("/v1/courses/missing", headers=auth(admin_token))
    assert resp.status_code == 404


# ---- enrollments ----


def test_enroll_student(client: TestClient, teacher_token: str) -> None:
    resp = client.post(
        f"{_COURSE}/enrollments",
        json={"student_id": "student-1"},
        headers=auth(teacher_token),
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["course_id"] == SAMPLE_COURSE_ID
    assert body["student_id"] == "student-1"
    assert body["status"] == "ACTIVE"


def test_enroll_twice_conflicts(client: TestClient, teacher_token: str) -> None:
    body = {"student_id": "student-1"}
    client.post(f"{_COURSE}/enrollments", json=body, headers=auth(teacher_token))
    resp = client.post(f"{_COURSE}/enrollments", json=body, headers=auth(teacher_token))
    assert resp.status_code == 409


def test_enroll_unknown_course_is_404(client: TestClient, admin_token: str) -> None:
    resp = client.post(
        "/v1/courses/missing/enrollments",
        json={"student_id": "student-1"},
        headers=auth(admin_token),
    )
    assert resp.status_code == 404


def test_seed_teacher_owns_sample_course(client: TestClient, admin_token: str) -> None:
    courses = client.get("/v1/courses", headers=auth(admin_token)).json()
    assert courses[0]["teacher_id"] == SAMPLE_TEACHER_ID


def test_deleting_course_removes_its_assignments_enrollments_and_submissions(
    client: TestClient, admin_token: str, teacher_token: str, student_token: str
) -> None:
    assignment = client.post(
        f"{_COURSE}/assignments", json={"title": "Quiz"}, headers=auth(teacher_token)
    ).json()
    client.post(
        f"{_COURSE}/enrollments",
        json={"student_id": "student-1"},
        headers=auth(teacher_token),
    )
    submission = client.post(
        f"/v1/assignments/{assignment['id']}/submissions",
        json={},
        headers=auth(student_token),
    ).json()

    assert client.delete(_COURSE, headers=auth(admin_token)).status_code == 204

    assert courses.ASSIGNMENTS == {}
    assert courses.ENROLLMENTS == {}
    assert courses.SUBMISSIONS == {}
    resp = client.post(
        f"/v1/assignments/{assignment['id']}/submissions",
        json={},
        headers=auth(student_token),
    )
    assert resp.status_code == 404
    resp = client.put(
        f"/v1/submissions/{submission['id']}/grade",
        json={"score": 1},
        headers=auth(admin_token),
    )
    assert resp.status_code == 404


def test_submit_to_assignment_of_missing_course_is_404(
    client: TestClient, teacher_token: str, student_token: str
) -> None:
    assignment = client.post(
        f"{_COURSE}/assignments", json={"title": "Quiz"}, headers=auth(teacher_token)
    ).json()
    # course record gone while the assignment lingers
    del courses.COURSES[SAMPLE_COURSE_ID]
    resp = client.post(
        f"/v1/assignments/{assignment['id']}/submissions",
        json={},
        headers=auth(student_token),
    )
    assert resp.status_code == 404
