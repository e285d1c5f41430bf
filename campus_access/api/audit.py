from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from campus_access.api.dependencies import require_capability
from campus_access.core.policy import Capability
from campus_access.models.principal import Principal
from campus_access.services import audit_log

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/audit-logs", tags=["audit"])


class AuditEntryOut(BaseModel):
    actor_id: str
    action: str
    resource_type: str
    resource_id: str
    timestamp: int


@router.get("", response_model=list[AuditEntryOut])
def list_audit_logs(
    principal: Annotated[
        Principal, Depends(require_capability(Capability.VIEW_AUDIT_LOGS))
    ],
) -> list[AuditEntryOut]:
    logger.info("Audit log requested by user=%s", principal.id)
    return [
        AuditEntryOut(
            actor_id=e.actor_id,
            action=e.action,
            resource_type=e.resource_type,
            resource_id=e.resource_id,
            timestamp=e.timestamp,
        )
        for e in audit_log.list_entries()
    ]
