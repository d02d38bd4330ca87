"""Pydantic schemas for bookings."""
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from lalan.models.booking import Booking, BookingStatus, DeliveryType
from lalan.models.identity import Identity, IdentityStatus
from lalan.services.lock_service import booking_time_remaining

_EMAIL_ADAPTER = TypeAdapter(EmailStr)


def _validate_contact_email(value: str) -> str:
    """Validate with EmailStr, letting dev-only ``*.local`` domains through."""
    email = value.strip()
    try:
        return _EMAIL_ADAPTER.validate_python(email)
    except ValidationError as exc:
        local_part, _, domain = email.partition("@")
        if local_part and domain.endswith(".local") and ":" not in local_part:
            return email
        raise ValueError("value is not a valid email address") from exc


class BookingItemCreate(BaseModel):
    """Line item as priced by the client at checkout."""

    item_id: uuid.UUID
    name: str = Field(min_length=1, max_length=255)
    quantity: int = Field(ge=1)
    price_per_day: int = Field(ge=0)
    deposit_per_unit: int = Field(default=0, ge=0)
    subtotal_rental: int = Field(ge=0)
    subtotal_deposit: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid")


class BookingCustomerCreate(BaseModel):
    """Contact details the renter wants on this booking."""

    name: str = Field(min_length=1, max_length=255)
    phone: str = Field(pattern=r"^\+?[0-9][0-9 \-]{5,31}$")
    email: str = Field(max_length=320)
    delivery_address: str = ""
    notes: str | None = Field(default=None, max_length=1024)

    model_config = ConfigDict(extra="forbid")

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return _validate_contact_email(value)


class BookingCreate(BaseModel):
    """Payload for creating bookings."""

    start_date: date
    end_date: date
    delivery_type: DeliveryType
    items: list[BookingItemCreate] = Field(default_factory=list)
    customer: BookingCustomerCreate
    discount: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid")


class BookingRead(BaseModel):
    """Booking header with the derived payment window."""

    id: uuid.UUID
    code: str
    hoster_id: uuid.UUID
    user_id: uuid.UUID
    identity_id: uuid.UUID | None = None
    start_date: date
    end_date: date
    total_days: int
    delivery_type: DeliveryType
    rental: int
    deposit: int
    discount: int
    total: int
    outstanding: int
    status: BookingStatus
    locked_until: datetime
    time_remaining_minutes: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_booking(cls, booking: Booking, *, now: datetime | None = None) -> "BookingRead":
        read = cls.model_validate(booking)
        read.time_remaining_minutes = booking_time_remaining(booking, now)
        return read


class BookingItemRead(BaseModel):
    id: uuid.UUID
    booking_id: uuid.UUID
    item_id: uuid.UUID
    name: str
    quantity: int
    price_per_day: int
    deposit_per_unit: int
    subtotal_rental: int
    subtotal_deposit: int

    model_config = ConfigDict(from_attributes=True)


class BookingCustomerRead(BaseModel):
    id: uuid.UUID
    booking_id: uuid.UUID
    name: str
    phone: str
    email: str
    delivery_address: str
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True)


class IdentitySummary(BaseModel):
    """Identity record the booking was verified against."""

    id: uuid.UUID
    status: IdentityStatus
    verified: bool
    reason: str | None = None
    uploaded_at: datetime

    @classmethod
    def from_identity(cls, identity: Identity) -> "IdentitySummary":
        return cls(
            id=identity.id,
            status=identity.status,
            verified=identity.verified,
            reason=identity.reason,
            uploaded_at=identity.created_at,
        )


class BookingDetail(BaseModel):
    """Header, line items, contact snapshot and identity reference."""

    booking: BookingRead
    items: list[BookingItemRead] = Field(default_factory=list)
    customer: BookingCustomerRead | None = None
    identity: IdentitySummary | None = None


class BookingSummary(BaseModel):
    """Row in a renter's booking list."""

    booking_id: uuid.UUID
    code: str
    start_date: date
    end_date: date
    total: int
    status: BookingStatus
    item_names: str
    total_items: int
    time_remaining_minutes: int
    created_at: datetime


class OwnerBookingSummary(BookingSummary):
    """Row in a hoster's booking list."""

    customer_name: str


class CustomerInfo(BaseModel):
    """Distinct renter who has booked a hoster's items."""

    user_id: uuid.UUID
    full_name: str
    email: str
    phone_number: str
    ktp_id: uuid.UUID | None = None
    ktp_photo: str | None = None
    status: IdentityStatus | None = None
    reason: str | None = None
    uploaded_at: datetime | None = None


class BookingStatusUpdate(BaseModel):
    """Owner request to move a booking to its next status."""

    status: BookingStatus


class BookingStatusRead(BaseModel):
    """Acknowledgement of a status change."""

    booking_id: uuid.UUID
    status: BookingStatus
    updated_at: datetime
    message: str = "Booking status updated"
