"""In-memory audit trail for mutating endpoints.

Will be replaced by a persistent store; until then entries live for the
lifetime of the process.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuditEntry:
    actor_id: str
    action: str
    resource_type: str
    resource_id: str
    timestamp: int


_ENTRIES: list[AuditEntry] = []


def record(*, actor_id: str, action: str, resource_type: str, resource_id: str) -> AuditEntry:
    entry = AuditEntry(
        actor_id=actor_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        timestamp=int(datetime.datetime.now(datetime.UTC).timestamp()),
    )
    _ENTRIES.append(entry)
    logger.info(
        "Audit: user=%s %s %s/%s",
        actor_id,
        action,
        resource_type,
        resource_id,
        extra={"user_id": actor_id},
    )
    return entry


def list_entries() -> list[AuditEntry]:
    """Newest first."""
    return list(reversed(_ENTRIES))
