"""Health check and system endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db_session
from src.core.settings import get_settings
from src.schemas.base import HealthCheckResponse
from src.services.notifications import get_notifier

router = APIRouter()
settings = get_settings()

SERVICE_NAME = "harmoniq-catalog-service"
SERVICE_VERSION = "1.0.0"


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(session: AsyncSession = Depends(get_db_session)):
    """
    Service health check endpoint.

    Checks database connectivity and the notification transport.
    """
    dependencies = {}
    overall_status = "healthy"

    try:
        result = await session.execute(text("SELECT 1 as health_check"))
        if result.scalar() != 1:
            raise RuntimeError("Unexpected database response")
        dependencies["database"] = {
            "status": "healthy",
            "details": "Connection successful"
        }
    except Exception as e:
        dependencies["database"] = {
            "status": "unhealthy",
            "error": str(e),
            "details": "Database connection failed"
        }
        overall_status = "unhealthy"

    notifier = get_notifier()
    if notifier.notifier_type == "ses" and not notifier.ses_client:
        dependencies["notifications"] = {
            "status": "degraded",
            "type": "ses",
            "details": "SES not properly configured"
        }
        if overall_status == "healthy":
            overall_status = "degraded"
    else:
        dependencies["notifications"] = {
            "status": "healthy",
            "type": notifier.notifier_type,
        }

    health = HealthCheckResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        version=SERVICE_VERSION,
        environment=settings.environment,
        dependencies=dependencies,
    )

    if overall_status == "unhealthy":
        return JSONResponse(status_code=503, content=health.model_dump(mode="json"))

    return health


@router.get("/version")
async def version_info():
    """Get service version information."""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "environment": settings.environment,
        "api_version": "v1",
    }
