from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure repo root is on sys.path so `import campus_access` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from campus_access.api import courses  # noqa: E402
from campus_access.main import app  # noqa: E402
from campus_access.models.principal import Principal  # noqa: E402
from campus_access.models.role import Role  # noqa: E402
from campus_access.services import audit_log, token_service  # noqa: E402


@pytest.fixture(autouse=True)
def reset_course_state() -> None:
    """Restore the seeded course and clear everything created on top of it."""
    courses.COURSES.clear()
    courses.ASSIGNMENTS.clear()
    courses.ENROLLMENTS.clear()
    courses.SUBMISSIONS.clear()
    courses.seed_sample_course()


@pytest.fixture(autouse=True)
def reset_audit_log() -> None:
    audit_log._ENTRIES.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def mint_token(
    user_id: str = "test-user",
    roles: Iterable[str] = (),
    parent_of: Iterable[str] = (),
) -> str:
    """Create a valid ES256 JWT for testing."""
    return token_service.create_access_token(
        sub=user_id, roles=roles, parent_of=parent_of
    )


def auth(token: str | None) -> dict[str, str]:
    """Bearer header, or no header at all for unauthenticated calls."""
    if token is None:
        return {}
    return {"Authorization": f"Bearer {token}"}


def make_principal(
    user_id: str = "u1",
    roles: Iterable[Role] = (),
    owned_student_ids: Iterable[str] = (),
) -> Principal:
    return Principal(
        id=user_id,
        roles=frozenset(roles),
        owned_student_ids=frozenset(owned_student_ids),
    )


@pytest.fixture
def admin_token() -> str:
    return mint_token(user_id="admin-1", roles=["ADMIN"])


@pytest.fixture
def teacher_token() -> str:
    """Token for the teacher of the seeded sample course."""
    return mint_token(user_id=courses.SAMPLE_TEACHER_ID, roles=["TEACHER"])


@pytest.fixture
def other_teacher_token() -> str:
    return mint_token(user_id="teacher-2", roles=["TEACHER"])


@pytest.fixture
def student_token() -> str:
    return mint_token(user_id="student-1", roles=["STUDENT"])


@pytest.fixture
def parent_token() -> str:
    return mint_token(user_id="parent-1", roles=["PARENT"], parent_of=["student-1"])
