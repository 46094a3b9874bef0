from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from accounts_service.api.accounts import router as accounts_router
from accounts_service.api.errors import register_exception_handlers
from accounts_service.api.health import router as health_router
from accounts_service.api.metrics_endpoint import router as metrics_router
from accounts_service.api.profile import router as profile_router
from accounts_service.api.sessions import router as sessions_router
from accounts_service.core.config import SETTINGS
from accounts_service.core.logging import setup_logging
from accounts_service.db.engine import lifespan_db
from accounts_service.middleware.metrics import MetricsMiddleware
from accounts_service.middleware.request_context import (
    RequestContextMiddleware,
    install_request_id_filter,
)

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
install_request_id_filter()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    async with lifespan_db():
        yield


app = FastAPI(
    title="accounts-service",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

register_exception_handlers(app)

# Last added runs first: RequestContext → Metrics → route handler
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(sessions_router)
app.include_router(profile_router)

logger.info(
    "accounts-service started  env=%s log_level=%s port=%d docs=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "on" if SETTINGS.is_dev else "off",
)
