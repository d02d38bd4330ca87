"""Error kinds raised by the booking lifecycle services."""

from __future__ import annotations

import enum
import uuid


class BookingErrorKind(str, enum.Enum):
    """Closed set of failures callers can match on."""

    NO_ITEMS_PROVIDED = "no_items_provided"
    INVALID_DATE_RANGE = "invalid_date_range"
    HOSTER_UNRESOLVED = "hoster_unresolved"
    MIXED_HOSTER_BASKET = "mixed_hoster_basket"
    IDENTITY_MISSING = "identity_missing"
    IDENTITY_PENDING = "identity_pending"
    IDENTITY_REJECTED = "identity_rejected"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    INVALID_STATUS = "invalid_status"
    STORAGE = "storage"


class BookingError(Exception):
    """Base error carrying a kind and a message safe to show the caller."""

    kind: BookingErrorKind

    def __init__(self, kind: BookingErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class NoItemsProvidedError(BookingError):
    def __init__(self) -> None:
        super().__init__(
            BookingErrorKind.NO_ITEMS_PROVIDED, "At least one item is required"
        )


class InvalidDateRangeError(BookingError):
    def __init__(self) -> None:
        super().__init__(
            BookingErrorKind.INVALID_DATE_RANGE, "end_date must be after start_date"
        )


class HosterUnresolvedError(BookingError):
    def __init__(self, item_id: uuid.UUID) -> None:
        super().__init__(
            BookingErrorKind.HOSTER_UNRESOLVED,
            "Hoster could not be determined for the requested item",
        )
        self.item_id = item_id


class MixedHosterBasketError(BookingError):
    def __init__(self, item_id: uuid.UUID) -> None:
        super().__init__(
            BookingErrorKind.MIXED_HOSTER_BASKET,
            "All items in a booking must belong to the same hoster",
        )
        self.item_id = item_id


class IdentityMissingError(BookingError):
    def __init__(self) -> None:
        super().__init__(
            BookingErrorKind.IDENTITY_MISSING,
            "Please upload your KTP before making a booking",
        )


class IdentityPendingError(BookingError):
    def __init__(self) -> None:
        super().__init__(
            BookingErrorKind.IDENTITY_PENDING,
            "Your KTP is still being reviewed",
        )


class IdentityRejectedError(BookingError):
    """Raised when the latest identity upload was rejected by an admin."""

    def __init__(self, reason: str | None) -> None:
        if reason:
            message = f"KTP Rejected - {reason}"
        else:
            message = "KTP rejected, please upload a new KTP"
        super().__init__(BookingErrorKind.IDENTITY_REJECTED, message)
        self.reason = reason


class BookingNotFoundError(BookingError):
    def __init__(self, booking_id: uuid.UUID) -> None:
        super().__init__(BookingErrorKind.NOT_FOUND, "Booking not found")
        self.booking_id = booking_id


class UnauthorizedError(BookingError):
    def __init__(self) -> None:
        super().__init__(
            BookingErrorKind.UNAUTHORIZED, "You do not have access to this booking"
        )


class InvalidStatusError(BookingError):
    def __init__(self, message: str = "Invalid status") -> None:
        super().__init__(BookingErrorKind.INVALID_STATUS, message)


class StorageError(BookingError):
    def __init__(self) -> None:
        super().__init__(BookingErrorKind.STORAGE, "Internal server error")


__all__ = [
    "BookingError",
    "BookingErrorKind",
    "BookingNotFoundError",
    "HosterUnresolvedError",
    "IdentityMissingError",
    "IdentityPendingError",
    "IdentityRejectedError",
    "InvalidDateRangeError",
    "InvalidStatusError",
    "MixedHosterBasketError",
    "NoItemsProvidedError",
    "StorageError",
    "UnauthorizedError",
]
