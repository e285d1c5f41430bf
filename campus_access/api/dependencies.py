from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from campus_access.core.metrics import ACCESS_DENIALS
from campus_access.core.policy import Capability
from campus_access.middleware.request_context import bind_request_fields
from campus_access.models.principal import Principal
from campus_access.models.role import Role
from campus_access.services import access_engine, token_service

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/oauth/token")


def forbid(guard: str, detail: str = "Insufficient permissions") -> HTTPException:
    """Count a denial and build the 403 for the caller to raise."""
    bind_request_fields(guard=guard)
    ACCESS_DENIALS.labels(guard=guard).inc()
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def require_user(
    raw_token: Annotated[str, Depends(oauth2_scheme)],
) -> Principal:
    """Extract and validate the JWT bearer token. Returns a Principal.

    Used as a FastAPI dependency on any protected endpoint. The Principal
    is rebuilt from the signed claims on every request.
    """
    try:
        claims = token_service.decode_access_token(raw_token)
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    principal = Principal.from_claims(claims)
    bind_request_fields(user_id=principal.id)
    logger.debug(
        "Token validated for user=%s roles=%s",
        principal.id,
        sorted(principal.roles),
    )
    return principal


def require_role(role: Role):
    """Dependency factory: demand a specific role.

    Usage: Depends(require_role(Role.ADMIN))
    """

    def _guard(
        principal: Annotated[Principal, Depends(require_user)],
    ) -> Principal:
        if not access_engine.has_role(principal, role):
            logger.warning(
                "Access denied: user=%s missing role=%s",
                principal.id,
                role,
                extra={"user_id": principal.id, "guard": f"role:{role}"},
            )
            raise forbid(f"role:{role}")
        return principal

    return _guard


def require_any_role(roles: Iterable[Role]):
    """Dependency factory: demand at least one of the given roles.

    Usage: Depends(require_any_role({Role.ADMIN, Role.TEACHER}))
    """
    wanted = frozenset(roles)

    def _guard(
        principal: Annotated[Principal, Depends(require_user)],
    ) -> Principal:
        if not access_engine.has_any_role(principal, wanted):
            logger.warning(
                "Access denied: user=%s has none of roles=%s",
                principal.id,
                sorted(wanted),
                extra={"user_id": principal.id, "guard": "any_role"},
            )
            raise forbid("any_role")
        return principal

    return _guard


def require_capability(capability: Capability):
    """Dependency factory: demand a named capability from the policy table.

    Usage: Depends(require_capability(Capability.MANAGE_COURSES))
    """

    def _guard(
        principal: Annotated[Principal, Depends(require_user)],
    ) -> Principal:
        if not access_engine.has_capability(principal, capability):
            logger.warning(
                "Access denied: user=%s lacks capability=%s",
                principal.id,
                capability,
                extra={"user_id": principal.id, "guard": f"capability:{capability}"},
            )
            raise forbid(f"capability:{capability}")
        return principal

    return _guard
