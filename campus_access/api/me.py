from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from campus_access.api.dependencies import require_user
from campus_access.models.principal import Principal
from campus_access.models.role import ROLE_PRIORITY
from campus_access.services import access_engine

router = APIRouter(prefix="/v1/access", tags=["access"])


class NavItemOut(BaseModel):
    name: str
    href: str


class AccessSummaryOut(BaseModel):
    id: str
    roles: list[str]
    highest_role: str | None
    capabilities: list[str]
    navigation: list[NavItemOut]


@router.get("/me", response_model=AccessSummaryOut)
def get_my_access(
    principal: Annotated[Principal, Depends(require_user)],
) -> AccessSummaryOut:
    """Everything a client needs to render role-aware UI for the caller.

    Roles are listed highest priority first; capabilities alphabetically.
    """
    highest = access_engine.get_highest_role(principal)
    return AccessSummaryOut(
        id=principal.id,
        roles=[
            str(r)
            for r in sorted(principal.roles, key=ROLE_PRIORITY.__getitem__, reverse=True)
        ],
        highest_role=str(highest) if highest is not None else None,
        capabilities=sorted(str(c) for c in access_engine.capabilities_for(principal)),
        navigation=[
            NavItemOut(name=item.name, href=item.href)
            for item in access_engine.visible_navigation(principal)
        ],
    )
