"""
Health check endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Request
from motor.motor_asyncio import AsyncIOMotorClient
from pydantic import BaseModel

from ...core.config import get_settings
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


@router.get("/", response_model=ApiResponse[HealthResponse])
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    settings = get_settings()
    return ok(request, data=HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=settings.app_version,
        service=settings.app_name,
    ), message="OK")


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    Pings the database and reports whether an AI provider is configured.
    """
    settings = get_settings()
    checks = {}
    all_ok = True

    client = AsyncIOMotorClient(settings.database.uri, serverSelectionTimeoutMS=5000)
    try:
        await client.admin.command("ping")
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {str(e)[:50]}"
        all_ok = False
    finally:
        client.close()

    if settings.azure_openai.is_configured:
        checks["ai_provider"] = "azure_openai"
    elif settings.openai.api_key:
        checks["ai_provider"] = "openai"
    else:
        checks["ai_provider"] = "not_configured"
        all_ok = False

    return ok(
        request,
        data={"ready": all_ok, "checks": checks},
        message="ready" if all_ok else "not ready",
    )


@router.get("/live", response_model=ApiResponse[dict])
async def liveness_check(request: Request):
    """Liveness check endpoint."""
    return ok(request, data={"alive": True}, message="alive")
