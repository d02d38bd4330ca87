"""Hoster-facing booking API."""

from __future__ import annotations

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lalan.api import deps
from lalan.api.errors import to_http_exception
from lalan.models.user import User
from lalan.schemas.booking import (
    BookingDetail,
    BookingStatusRead,
    BookingStatusUpdate,
    CustomerInfo,
    OwnerBookingSummary,
)
from lalan.security.ownership import BookingActor
from lalan.services import booking_service, status_service
from lalan.services.errors import BookingError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[OwnerBookingSummary], summary="List bookings on my items")
async def list_bookings(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_hoster)],
) -> list[OwnerBookingSummary]:
    return await booking_service.list_bookings_for_owner(session, owner_id=current_user.id)


@router.get(
    "/customers",
    response_model=list[CustomerInfo],
    summary="List customers who booked my items",
)
async def list_customers(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_hoster)],
) -> list[CustomerInfo]:
    return await booking_service.list_distinct_customers_for_owner(
        session, owner_id=current_user.id
    )


@router.get("/{booking_id}", response_model=BookingDetail, summary="Get booking")
async def get_booking(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_hoster)],
) -> BookingDetail:
    try:
        return await booking_service.get_booking_detail(
            session, booking_id=booking_id, actor=BookingActor.owner(current_user.id)
        )
    except BookingError as exc:
        raise to_http_exception(exc) from exc


@router.put(
    "/{booking_id}/status",
    response_model=BookingStatusRead,
    summary="Advance booking status",
)
async def update_booking_status(
    booking_id: uuid.UUID,
    payload: BookingStatusUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_hoster)],
) -> BookingStatusRead:
    try:
        booking = await status_service.transition_booking_status(
            session,
            owner_id=current_user.id,
            booking_id=booking_id,
            target=payload.status,
        )
    except BookingError as exc:
        logger.info(
            "Status update refused booking=%s hoster=%s: %s",
            booking_id,
            current_user.id,
            exc,
        )
        raise to_http_exception(exc) from exc
    return BookingStatusRead(
        booking_id=booking.id, status=booking.status, updated_at=booking.updated_at
    )


@router.post(
    "/{booking_id}/cancel",
    response_model=BookingStatusRead,
    summary="Cancel a booking before the items are handed over",
)
async def cancel_booking(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_hoster)],
) -> BookingStatusRead:
    try:
        booking = await status_service.cancel_booking(
            session, actor=BookingActor.owner(current_user.id), booking_id=booking_id
        )
    except BookingError as exc:
        raise to_http_exception(exc) from exc
    return BookingStatusRead(
        booking_id=booking.id,
        status=booking.status,
        updated_at=booking.updated_at,
        message="Booking cancelled",
    )
