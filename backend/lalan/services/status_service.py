"""Owner-driven booking status transitions and cancellation."""
from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lalan.models.booking import Booking, BookingStatus
from lalan.security.ownership import BookingActor, BookingRole
from lalan.services.booking_service import load_booking_for_actor
from lalan.services.errors import InvalidStatusError, StorageError

logger = logging.getLogger(__name__)

# Each status has exactly one successor; anything else is rejected.
_NEXT_STATUS: dict[BookingStatus, BookingStatus] = {
    BookingStatus.PENDING: BookingStatus.ON_PROGRESS,
    BookingStatus.ON_PROGRESS: BookingStatus.ON_RENT,
    BookingStatus.ON_RENT: BookingStatus.COMPLETED,
}

_CANCELLABLE_BY: dict[BookingRole, frozenset[BookingStatus]] = {
    BookingRole.RENTER: frozenset({BookingStatus.PENDING}),
    BookingRole.OWNER: frozenset({BookingStatus.PENDING, BookingStatus.ON_PROGRESS}),
}


def next_status(current: BookingStatus) -> BookingStatus | None:
    return _NEXT_STATUS.get(current)


def validate_transition(current: BookingStatus, target: BookingStatus) -> None:
    """Raise InvalidStatusError unless ``target`` is the successor of ``current``."""
    expected = next_status(current)
    if expected is None:
        raise InvalidStatusError(f"Booking in status {current.value} cannot be advanced")
    if target != expected:
        raise InvalidStatusError(
            f"Invalid status transition from {current.value} to {target.value}"
        )


async def _compare_and_set(
    session: AsyncSession,
    *,
    booking: Booking,
    expected: BookingStatus,
    target: BookingStatus,
) -> Booking:
    """Write ``target`` only if the row still holds ``expected``."""
    # Rollback expires ``booking``; log with the id captured up front.
    booking_id = booking.id
    stmt = (
        update(Booking)
        .where(Booking.id == booking_id, Booking.status == expected)
        .values(status=target, updated_at=datetime.now(UTC))
        .execution_options(synchronize_session=False)
    )
    try:
        result = await session.execute(stmt)
        if result.rowcount != 1:
            await session.rollback()
            logger.warning(
                "Booking %s changed concurrently; expected %s", booking_id, expected.value
            )
            raise InvalidStatusError("Booking status changed, reload and try again")
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Status update for booking %s rolled back: %s", booking_id, exc)
        raise StorageError() from exc

    await session.refresh(booking)
    return booking


async def transition_booking_status(
    session: AsyncSession,
    *,
    owner_id: uuid.UUID,
    booking_id: uuid.UUID,
    target: BookingStatus,
) -> Booking:
    """Advance a booking one step along pending, on_progress, on_rent, completed."""
    booking = await load_booking_for_actor(
        session, booking_id=booking_id, actor=BookingActor.owner(owner_id)
    )
    current = booking.status
    validate_transition(current, target)
    updated = await _compare_and_set(session, booking=booking, expected=current, target=target)
    logger.info("Booking %s moved %s -> %s", booking_id, current.value, target.value)
    return updated


async def cancel_booking(
    session: AsyncSession,
    *,
    actor: BookingActor,
    booking_id: uuid.UUID,
) -> Booking:
    """Cancel a booking that has not progressed past the actor's cutoff."""
    booking = await load_booking_for_actor(session, booking_id=booking_id, actor=actor)
    current = booking.status
    if current not in _CANCELLABLE_BY[actor.role]:
        raise InvalidStatusError(
            f"Booking in status {current.value} can no longer be cancelled"
        )
    updated = await _compare_and_set(
        session, booking=booking, expected=current, target=BookingStatus.CANCELLED
    )
    logger.info("Booking %s cancelled by %s %s", booking_id, actor.role.value, actor.user_id)
    return updated
