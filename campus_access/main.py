from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campus_access.api.audit import router as audit_router
from campus_access.api.courses import router as courses_router
from campus_access.api.health import router as health_router
from campus_access.api.me import router as me_router
from campus_access.api.metrics_endpoint import router as metrics_router
from campus_access.api.submissions import router as submissions_router
from campus_access.core.config import SETTINGS
from campus_access.core.logging import setup_logging
from campus_access.middleware.metrics import MetricsMiddleware
from campus_access.middleware.request_context import (
    RequestContextFilter,
    RequestContextMiddleware,
)

# Configure logging before anything else runs.
setup_logging(
    SETTINGS.log_level,
    json_format=SETTINGS.log_json,
    filters=[RequestContextFilter()],
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="campus-access",
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Last-added runs first: RequestContext → Metrics → CORS → route handler
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(metrics_router)
app.include_router(audit_router)
app.include_router(courses_router)
app.include_router(health_router)
app.include_router(me_router)
app.include_router(submissions_router)

logger.info(
    "campus-access started  env=%s log_level=%s port=%d docs=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "on" if SETTINGS.is_dev else "off",
)
