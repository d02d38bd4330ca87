"""Versioned API router."""

from fastapi import APIRouter

from . import customer_bookings, health, hoster_bookings

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(
    customer_bookings.router, prefix="/customer/bookings", tags=["customer-bookings"]
)
router.include_router(
    hoster_bookings.router, prefix="/hoster/bookings", tags=["hoster-bookings"]
)
