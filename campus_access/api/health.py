"""Liveness and readiness endpoints.

The service has no backing stores to probe, so both answer as long as
the process can serve a request.
"""

from __future__ import annotations

from fastapi import APIRouter, Response

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.get("/ready")
async def ready() -> Response:
    return Response(status_code=200)
