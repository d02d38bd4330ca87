"""ORM models package export."""

from lalan.models.booking import (
    Booking,
    BookingCustomer,
    BookingItem,
    BookingStatus,
    DeliveryType,
)
from lalan.models.identity import Identity, IdentityStatus
from lalan.models.item import Item
from lalan.models.user import User, UserRole, UserStatus

__all__ = [
    "Booking",
    "BookingCustomer",
    "BookingItem",
    "BookingStatus",
    "DeliveryType",
    "Identity",
    "IdentityStatus",
    "Item",
    "User",
    "UserRole",
    "UserStatus",
]
