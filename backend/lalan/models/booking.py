"""Booking header, line item snapshots and the renter contact snapshot."""
from __future__ import annotations

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lalan.db.base import Base
from lalan.models.mixins import TimestampMixin
from lalan.security.encryption import EncryptedStr


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class BookingStatus(str, enum.Enum):
    """Lifecycle states for bookings."""

    PENDING = "pending"
    ON_PROGRESS = "on_progress"
    ON_RENT = "on_rent"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DeliveryType(str, enum.Enum):
    """How the rented items reach the renter."""

    PICKUP = "pickup"
    DELIVERY = "delivery"


class Booking(TimestampMixin, Base):
    """Reservation of one hoster's items for a date range."""

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    hoster_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    identity_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("identities.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus, name="booking_status", values_callable=_enum_values),
        default=BookingStatus.PENDING,
        nullable=False,
        index=True,
    )
    locked_until: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    total_days: Mapped[int] = mapped_column(Integer, nullable=False)
    delivery_type: Mapped[DeliveryType] = mapped_column(
        Enum(DeliveryType, name="delivery_type", values_callable=_enum_values),
        nullable=False,
    )
    rental: Mapped[int] = mapped_column(Integer, nullable=False)
    deposit: Mapped[int] = mapped_column(Integer, nullable=False)
    discount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total: Mapped[int] = mapped_column(Integer, nullable=False)
    outstanding: Mapped[int] = mapped_column(Integer, nullable=False)

    items: Mapped[list["BookingItem"]] = relationship(
        "BookingItem",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingItem.created_at",
    )
    customer: Mapped["BookingCustomer | None"] = relationship(
        "BookingCustomer",
        back_populates="booking",
        cascade="all, delete-orphan",
        uselist=False,
    )
    identity: Mapped["Identity | None"] = relationship("Identity")
    renter: Mapped["User"] = relationship("User", foreign_keys=[user_id])


class BookingItem(TimestampMixin, Base):
    """Catalog item as it was priced when the booking was made."""

    __tablename__ = "booking_items"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("items.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_per_day: Mapped[int] = mapped_column(Integer, nullable=False)
    deposit_per_unit: Mapped[int] = mapped_column(Integer, nullable=False)
    subtotal_rental: Mapped[int] = mapped_column(Integer, nullable=False)
    subtotal_deposit: Mapped[int] = mapped_column(Integer, nullable=False)

    booking: Mapped["Booking"] = relationship("Booking", back_populates="items")


class BookingCustomer(TimestampMixin, Base):
    """Renter contact details captured at booking time, never re-synced."""

    __tablename__ = "booking_customers"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(EncryptedStr(512), nullable=False)
    email: Mapped[str] = mapped_column(EncryptedStr(512), nullable=False)
    delivery_address: Mapped[str] = mapped_column(EncryptedStr(2048), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1024))

    booking: Mapped["Booking"] = relationship("Booking", back_populates="customer")
