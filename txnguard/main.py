"""FastAPI application entry point for txnguard."""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from txnguard.api.middleware.error_handler import (
    global_exception_handler,
    request_validation_handler,
)
from txnguard.api.middleware.logging import StructuredLoggingMiddleware
from txnguard.api.routes.health import router as health_router
from txnguard.api.routes.transactions import router as transactions_router
from txnguard.api.routes.users import router as users_router
from txnguard.config import settings
from txnguard.domains.fraud.errors import FraudServiceError
from txnguard.shared.logging import setup_logging

logger = structlog.get_logger()

# Track app start time for uptime calculation
APP_START_TIME: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown logic."""
    global APP_START_TIME
    APP_START_TIME = time.time()
    setup_logging(settings.log_level, settings.log_format)

    logger.info(
        "txnguard_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
    )

    from txnguard.db.database import init_db

    await init_db()

    yield

    logger.info("txnguard_shutting_down")


app = FastAPI(
    title="txnguard",
    description="Per-user adaptive fraud scoring for payment transactions",
    version=settings.app_version,
    lifespan=lifespan,
)

# Structured logging middleware
app.add_middleware(StructuredLoggingMiddleware)

# Domain errors map to 4xx/5xx; anything else is a logged 500
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(FraudServiceError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Register routers
app.include_router(health_router)
app.include_router(transactions_router)
app.include_router(users_router)


def get_uptime() -> int:
    """Get application uptime in seconds."""
    if APP_START_TIME == 0.0:
        return 0
    return int(time.time() - APP_START_TIME)
