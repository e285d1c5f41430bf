from __future__ import annotations

import dataclasses

import pytest

from campus_access.models.principal import Principal
from campus_access.models.role import ROLE_PRIORITY, Role, parse_role
from campus_access.services import access_engine

# ---- Role ----


def test_role_set_is_closed() -> None:
    assert {r.value for r in Role} == {"ADMIN", "TEACHER", "STUDENT", "PARENT"}


def test_role_priorities_are_distinct_and_ordered() -> None:
    assert ROLE_PRIORITY[Role.ADMIN] > ROLE_PRIORITY[Role.TEACHER]
    assert ROLE_PRIORITY[Role.TEACHER] > ROLE_PRIORITY[Role.STUDENT]
    assert ROLE_PRIORITY[Role.STUDENT] > ROLE_PRIORITY[Role.PARENT]
    assert len(set(ROLE_PRIORITY.values())) == len(Role)


def test_role_priority_is_read_only() -> None:
    with pytest.raises(TypeError):
        ROLE_PRIORITY[Role.PARENT] = 99  # type: ignore[index]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("ADMIN", Role.ADMIN),
        (Role.PARENT, Role.PARENT),
        ("admin", None),
        (" ADMIN", None),
        ("ADMINISTRATOR", None),
        (4, None),
        (None, None),
    ],
)
def test_parse_role_is_exact(raw: object, expected: Role | None) -> None:
    assert parse_role(raw) is expected


# ---- Principal.from_claims ----


def test_from_claims_reads_roles_list() -> None:
    p = Principal.from_claims({"sub": "u1", "roles": ["TEACHER", "ADMIN"]})
    assert p.id == "u1"
    assert p.roles == frozenset({Role.TEACHER, Role.ADMIN})
    assert p.owned_student_ids == frozenset()


def test_from_claims_coerces_single_role_to_set() -> None:
    p = Principal.from_claims({"sub": "u1", "role": "STUDENT"})
    assert p.roles == frozenset({Role.STUDENT})


def test_from_claims_accepts_roles_as_plain_string() -> None:
    p = Principal.from_claims({"sub": "u1", "roles": "PARENT"})
    assert p.roles == frozenset({Role.PARENT})


def test_from_claims_roles_list_wins_over_single_role() -> None:
    p = Principal.from_claims({"sub": "u1", "roles": ["PARENT"], "role": "ADMIN"})
    assert p.roles == frozenset({Role.PARENT})


def test_from_claims_drops_unknown_roles() -> None:
    p = Principal.from_claims({"sub": "u1", "roles": ["admin", "user", "TEACHER"]})
    assert p.roles == frozenset({Role.TEACHER})


def test_from_claims_deduplicates_roles() -> None:
    p = Principal.from_claims({"sub": "u1", "roles": ["STUDENT", "STUDENT"]})
    assert p.roles == frozenset({Role.STUDENT})


@pytest.mark.parametrize("raw", [None, 7, {"ADMIN": True}], ids=["none", "int", "dict"])
def test_from_claims_malformed_roles_become_empty(raw: object) -> None:
    p = Principal.from_claims({"sub": "u1", "roles": raw})
    assert p.roles == frozenset()


def test_from_claims_without_any_role_claim() -> None:
    assert Principal.from_claims({"sub": "u1"}).roles == frozenset()


def test_from_claims_reads_parent_links() -> None:
    p = Principal.from_claims({"sub": "p1", "roles": ["PARENT"], "parent_of": ["s1", "s2"]})
    assert p.owned_student_ids == frozenset({"s1", "s2"})


def test_from_claims_ignores_string_parent_links() -> None:
    p = Principal.from_claims({"sub": "p1", "parent_of": "s1"})
    assert p.owned_student_ids == frozenset()


def test_from_claims_drops_non_string_parent_links() -> None:
    p = Principal.from_claims(
        {"sub": "p1", "roles": ["PARENT"], "parent_of": ["s1", None, 5, ["s2"]]}
    )
    assert p.owned_student_ids == frozenset({"s1"})
    assert not access_engine.can_parent_access_student(p, "None")
    assert not access_engine.can_parent_access_student(p, "5")
    assert access_engine.can_parent_access_student(p, "s1")


def test_from_claims_stringifies_subject() -> None:
    assert Principal.from_claims({"sub": 42}).id == "42"


def test_principal_is_frozen() -> None:
    p = Principal(id="u1", roles=frozenset({Role.STUDENT}))
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.roles = frozenset({Role.ADMIN})  # type: ignore[misc]
