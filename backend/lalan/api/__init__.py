"""API router modules."""

from fastapi import APIRouter

from lalan.api.rate_limit import parse_rate, rate_limit
from lalan.core.config import get_settings

from .v1 import router as api_v1_router

settings = get_settings()

api_router = APIRouter()
api_router.include_router(
    api_v1_router,
    prefix=settings.api_v1_prefix,
    dependencies=[rate_limit(parse_rate(settings.rate_limit_default, fallback=(100, 60)))],
)

__all__ = ["api_router"]
