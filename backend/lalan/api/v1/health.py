"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter

from lalan.core.config import get_settings

router = APIRouter()


@router.get("", summary="Service health status")
async def healthcheck() -> dict[str, str | int]:
    """Return application health metadata."""
    settings = get_settings()
    return {
        "status": "ok",
        "service": settings.app_name,
        "timestamp": datetime.now(UTC).isoformat(),
        "environment": settings.app_env,
        "booking_lock_minutes": settings.booking_lock_minutes,
    }
