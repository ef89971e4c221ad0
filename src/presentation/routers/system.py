"""Unversioned service endpoints: root, health and config.

None of them touch the cost backend, so load balancers can call them at
any rate.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.application.services.workflow_registry import WorkflowRegistry
from src.core.config import settings
from src.core.container import get_workflow_registry

system_router = APIRouter(tags=["System"])


@system_router.get("/")
async def root() -> dict[str, str]:
    return {
        "message": settings.app_name,
        "status": "operational",
        "version": settings.app_version,
    }


@system_router.get("/health")
async def health(
    registry: WorkflowRegistry = Depends(get_workflow_registry),
) -> dict[str, str | int]:
    """Liveness plus the number of connection workflows held in memory."""
    return {"status": "healthy", "active_workflows": len(registry)}


@system_router.get("/config")
async def get_config() -> JSONResponse:
    """Effective settings with secrets redacted (development only, 403 elsewhere)."""
    if not settings.is_development:
        return JSONResponse(
            status_code=403,
            content={"detail": "Config endpoint only available in development"},
        )

    return JSONResponse(
        content={
            "environment": settings.environment.value,
            "debug": settings.debug,
            "log_level": settings.log_level,
            "api": {
                "name": settings.app_name,
                "version": settings.app_version,
                "base_url": settings.api_base_url,
                "v1_prefix": settings.api_v1_prefix,
            },
            "backend": {
                "base_url": settings.backend_api_base_url,
                "token": "<redacted>" if settings.backend_api_token else None,
                "timeout_seconds": settings.backend_timeout_seconds,
            },
            "polling": {
                "interval_seconds": settings.poll_interval_seconds,
                "max_attempts": settings.poll_max_attempts,
                "fallback_verify_every": settings.fallback_verify_every,
                "timeout_seconds": settings.poll_timeout_seconds,
            },
            "default_connection_kind": settings.default_connection_kind,
            "cors": {"origins": settings.cors_origins},
        }
    )
