"""Translate booking service errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from lalan.services.errors import BookingError, BookingErrorKind

logger = logging.getLogger(__name__)

_STATUS_BY_KIND: dict[BookingErrorKind, int] = {
    BookingErrorKind.NO_ITEMS_PROVIDED: status.HTTP_400_BAD_REQUEST,
    BookingErrorKind.INVALID_DATE_RANGE: status.HTTP_400_BAD_REQUEST,
    BookingErrorKind.HOSTER_UNRESOLVED: status.HTTP_400_BAD_REQUEST,
    BookingErrorKind.MIXED_HOSTER_BASKET: status.HTTP_400_BAD_REQUEST,
    BookingErrorKind.IDENTITY_MISSING: status.HTTP_400_BAD_REQUEST,
    BookingErrorKind.IDENTITY_PENDING: status.HTTP_400_BAD_REQUEST,
    BookingErrorKind.IDENTITY_REJECTED: status.HTTP_400_BAD_REQUEST,
    BookingErrorKind.INVALID_STATUS: status.HTTP_400_BAD_REQUEST,
    BookingErrorKind.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    BookingErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    BookingErrorKind.STORAGE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(error: BookingError) -> HTTPException:
    """Map a booking error to an HTTPException with a client-safe detail."""
    status_code = _STATUS_BY_KIND[error.kind]
    if status_code >= 500:
        logger.error("Booking operation failed: %s", error.kind.value)
    return HTTPException(
        status_code=status_code,
        detail={"code": error.kind.value, "message": error.message},
    )
