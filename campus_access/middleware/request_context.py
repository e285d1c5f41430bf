"""Request context middleware.

Every request gets an ID (X-Request-ID is echoed when the client sends
one) and a small mutable field map. Guards bind the authenticated
principal's id and, on a 403, the name of the denying guard into that
map; the summary line written when the response leaves carries both.

Dependencies run in a worker thread or a child task, each with a copy
of the current context. The copies share the same dict object, so
``bind_request_fields`` from a guard is visible here afterwards, while a
plain ``ContextVar.set`` there would be lost.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")
_fields_var: ContextVar[dict[str, str] | None] = ContextVar(
    "request_fields", default=None
)


def bind_request_fields(**fields: str) -> None:
    """Attach fields (user_id, guard) to the request being handled.

    Outside a request this does nothing.
    """
    current = _fields_var.get()
    if current is not None:
        current.update(fields)


def request_fields() -> dict[str, str]:
    return dict(_fields_var.get() or {})


class RequestContextFilter(logging.Filter):
    """Stamp request_id and any bound fields onto a LogRecord.

    Values passed explicitly through ``extra=`` are left alone.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()  # type: ignore[attr-defined]
        for key, value in request_fields().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_var.set(req_id)
        fields: dict[str, str] = {}
        _fields_var.set(fields)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        user_id = fields.get("user_id")
        guard = fields.get("guard")
        logger.info(
            "%s %s → %d (%.1fms) user=%s%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            user_id or "-",
            f" denied_by={guard}" if guard else "",
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "user_id": user_id,
                "guard": guard,
            },
        )

        response.headers["X-Request-ID"] = req_id
        return response
