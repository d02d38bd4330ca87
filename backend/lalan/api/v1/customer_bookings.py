"""Renter-facing booking API."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from lalan.api import deps
from lalan.api.errors import to_http_exception
from lalan.api.rate_limit import parse_rate, rate_limit
from lalan.core.config import get_settings
from lalan.models.user import User
from lalan.schemas.booking import (
    BookingCreate,
    BookingDetail,
    BookingStatusRead,
    BookingSummary,
)
from lalan.security.ownership import BookingActor
from lalan.services import booking_service, status_service
from lalan.services.errors import BookingError

router = APIRouter()

settings = get_settings()

_BOOKING_RATE_DEP = rate_limit(parse_rate(settings.rate_limit_booking, fallback=(20, 60)))


@router.post(
    "",
    response_model=BookingDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Create booking",
    dependencies=[_BOOKING_RATE_DEP],
)
async def create_booking(
    payload: BookingCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_customer)],
) -> BookingDetail:
    try:
        return await booking_service.create_booking(
            session, renter_id=current_user.id, payload=payload
        )
    except BookingError as exc:
        raise to_http_exception(exc) from exc


@router.get("", response_model=list[BookingSummary], summary="List my bookings")
async def list_bookings(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_customer)],
) -> list[BookingSummary]:
    return await booking_service.list_bookings_for_renter(
        session, renter_id=current_user.id
    )


@router.get("/{booking_id}", response_model=BookingDetail, summary="Get booking")
async def get_booking(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_customer)],
) -> BookingDetail:
    try:
        return await booking_service.get_booking_detail(
            session, booking_id=booking_id, actor=BookingActor.renter(current_user.id)
        )
    except BookingError as exc:
        raise to_http_exception(exc) from exc


@router.post(
    "/{booking_id}/cancel",
    response_model=BookingStatusRead,
    summary="Cancel a pending booking",
)
async def cancel_booking(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_customer)],
) -> BookingStatusRead:
    try:
        booking = await status_service.cancel_booking(
            session, actor=BookingActor.renter(current_user.id), booking_id=booking_id
        )
    except BookingError as exc:
        raise to_http_exception(exc) from exc
    return BookingStatusRead(
        booking_id=booking.id,
        status=booking.status,
        updated_at=booking.updated_at,
        message="Booking cancelled",
    )
