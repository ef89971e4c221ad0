"""
Main FastAPI application entry point.

Builds the FastAPI application: trace middleware, CORS, RFC 7807 exception
handlers, the system router and the versioned API router. The lifespan
wires the event bus at startup and tears down every running connection
workflow at shutdown so no polling timer outlives the application.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.core.config import settings
from src.core.container import (
    get_data_sync_handler,
    get_event_bus,
    get_logger,
    get_workflow_registry,
)
from src.presentation.routers import system_router
from src.presentation.routers.api.middleware import TraceMiddleware
from src.presentation.routers.api.v1 import v1_router
from src.presentation.routers.api.v1.errors import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Handles startup and shutdown events:
    - Startup: Build the event bus and its subscriptions
    - Shutdown: Close all connection workflows (stops their pollers) and
      cancel data sync requests still in flight

    Args:
        app: FastAPI application instance.

    Yields:
        None during application lifetime.
    """
    logger = get_logger()
    get_event_bus()
    logger.info("application_started", environment=settings.environment.value)

    yield

    await get_workflow_registry().aclose_all()
    await get_data_sync_handler().aclose()
    logger.info("application_stopped")


app = FastAPI(
    title=settings.app_name,
    description="Automated cloud-account connection workflow",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
    lifespan=lifespan,
)

# Request correlation
app.add_middleware(TraceMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Trace-Id"],
)

register_exception_handlers(app)

app.include_router(system_router)
app.include_router(v1_router)
