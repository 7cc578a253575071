"""Health check and status endpoints."""

import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from src.config import settings

# Module-level variable to track application start time
_app_start_time = time.time()

router = APIRouter(tags=["Health"])


@router.get("/status")
async def get_status() -> JSONResponse:
    """
    Health check endpoint.

    Makes no remote calls; reports which optional integrations are
    configured so a misconfigured deployer is visible before the first
    deployment fails.

    Returns:
        JSONResponse with status, version, uptime_seconds and integrations
    """
    uptime_seconds = int(time.time() - _app_start_time)

    return JSONResponse(
        status_code=200,
        content={
            "status": "ok",
            "version": settings.api_version,
            "uptime_seconds": uptime_seconds,
            "meta_configured": settings.meta_url is not None,
            "gitlab_callback_enabled": settings.gitlab_enabled,
        },
    )
