"""Payment lock window for pending bookings."""
from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

from lalan.core.config import get_settings
from lalan.models.booking import Booking, BookingStatus


def _coerce_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def lock_deadline(now: datetime | None = None) -> datetime:
    """Return when a booking created at ``now`` stops being held for payment."""
    created = _coerce_utc(now or datetime.now(UTC))
    return created + timedelta(minutes=get_settings().booking_lock_minutes)


def time_remaining_minutes(locked_until: datetime, now: datetime | None = None) -> int:
    """Minutes left before the lock lapses, rounded up and floored at zero."""
    current = _coerce_utc(now or datetime.now(UTC))
    remaining = (_coerce_utc(locked_until) - current).total_seconds()
    if remaining <= 0:
        return 0
    return math.ceil(remaining / 60)


def is_lock_expired(locked_until: datetime, now: datetime | None = None) -> bool:
    return time_remaining_minutes(locked_until, now) == 0


def booking_time_remaining(booking: Booking, now: datetime | None = None) -> int:
    """Lock minutes shown for ``booking``; only pending bookings are held."""
    if booking.status != BookingStatus.PENDING:
        return 0
    return time_remaining_minutes(booking.locked_until, now)
