"""Booking ownership checks for renters and hosters."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass

from lalan.models.booking import Booking
from lalan.services.errors import UnauthorizedError


class BookingRole(str, enum.Enum):
    """Which side of a booking the acting user is on."""

    RENTER = "renter"
    OWNER = "owner"


@dataclass(frozen=True, slots=True)
class BookingActor:
    """Authenticated user acting on a booking, passed explicitly to services."""

    user_id: uuid.UUID
    role: BookingRole

    @classmethod
    def renter(cls, user_id: uuid.UUID) -> "BookingActor":
        return cls(user_id=user_id, role=BookingRole.RENTER)

    @classmethod
    def owner(cls, user_id: uuid.UUID) -> "BookingActor":
        return cls(user_id=user_id, role=BookingRole.OWNER)


def owns_booking(booking: Booking, actor: BookingActor) -> bool:
    if actor.role == BookingRole.RENTER:
        return booking.user_id == actor.user_id
    return booking.hoster_id == actor.user_id


def ensure_booking_access(booking: Booking, actor: BookingActor) -> None:
    """Raise UnauthorizedError unless ``actor`` is the booking's renter or hoster."""
    if not owns_booking(booking, actor):
        raise UnauthorizedError()


__all__ = ["BookingActor", "BookingRole", "ensure_booking_access", "owns_booking"]
