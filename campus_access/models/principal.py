from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from campus_access.models.role import Role, parse_role

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Principal:
    """Acting identity for one access decision.

    Built once per request from a validated JWT (see ``from_claims``) and
    handed to the access engine. Nothing downstream mutates it.

        id: subject from JWT, compared by exact equality for ownership
        roles: platform roles (ADMIN, TEACHER, STUDENT, PARENT)
        owned_student_ids: students a PARENT principal is linked to
    """

    id: str
    roles: frozenset[Role]
    owned_student_ids: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_claims(cls, claims: Mapping[str, object]) -> Principal:
        """Normalize a decoded token payload into a Principal.

        Accepts either a ``roles`` list or the legacy single ``role``
        string; both end up as a frozenset of Role. Role strings that are
        not an exact enumeration value are dropped.
        """
        raw_roles = claims.get("roles")
        if raw_roles is None and "role" in claims:
            raw_roles = [claims["role"]]

        return cls(
            id=str(claims["sub"]),
            roles=_normalize_roles(raw_roles),
            owned_student_ids=_normalize_ids(claims.get("parent_of")),
        )


def _normalize_roles(raw: object) -> frozenset[Role]:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple, set, frozenset)):
        return frozenset()

    roles: set[Role] = set()
    for value in raw:
        role = parse_role(value)
        if role is None:
            logger.debug("Dropping unknown role claim %r", value)
            continue
        roles.add(role)
    return frozenset(roles)


def _normalize_ids(raw: object) -> frozenset[str]:
    if not isinstance(raw, Iterable) or isinstance(raw, (str, bytes)):
        return frozenset()
    ids: set[str] = set()
    for value in raw:
        if not isinstance(value, str):
            logger.debug("Dropping non-string student link %r", value)
            continue
        ids.add(value)
    return frozenset(ids)
