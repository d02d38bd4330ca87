"""Booking creation and read models for renters and hosters."""
from __future__ import annotations

import logging
import secrets
import uuid
from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lalan.models.booking import (
    Booking,
    BookingCustomer,
    BookingItem,
    BookingStatus,
)
from lalan.schemas.booking import (
    BookingCreate,
    BookingCustomerRead,
    BookingDetail,
    BookingItemRead,
    BookingRead,
    BookingSummary,
    CustomerInfo,
    IdentitySummary,
    OwnerBookingSummary,
)
from lalan.security.ownership import BookingActor, ensure_booking_access
from lalan.security.redact import mask_email, mask_phone
from lalan.services import identity_service, lock_service, pricing_service
from lalan.services.errors import (
    BookingNotFoundError,
    IdentityMissingError,
    NoItemsProvidedError,
    StorageError,
)

logger = logging.getLogger(__name__)

_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def generate_booking_code(now: datetime | None = None) -> str:
    """Return a short human-readable code such as ``BK-20251220-7KQ2MX``."""
    stamp = (now or datetime.now(UTC)).strftime("%Y%m%d")
    suffix = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(6))
    return f"BK-{stamp}-{suffix}"


def _booking_query():
    return select(Booking).options(
        selectinload(Booking.items),
        selectinload(Booking.customer),
        selectinload(Booking.identity),
    )


async def _load_booking(
    session: AsyncSession, booking_id: uuid.UUID, *, refresh: bool = False
) -> Booking | None:
    stmt = _booking_query().where(Booking.id == booking_id)
    if refresh:
        stmt = stmt.execution_options(populate_existing=True)
    result = await session.execute(stmt)
    return result.scalars().unique().one_or_none()


def build_booking_detail(booking: Booking, *, now: datetime | None = None) -> BookingDetail:
    """Serialize a fully loaded booking, deriving the lock countdown at read time."""
    return BookingDetail(
        booking=BookingRead.from_booking(booking, now=now),
        items=[BookingItemRead.model_validate(item) for item in booking.items],
        customer=(
            BookingCustomerRead.model_validate(booking.customer)
            if booking.customer is not None
            else None
        ),
        identity=(
            IdentitySummary.from_identity(booking.identity)
            if booking.identity is not None
            else None
        ),
    )


async def write_reservation(
    session: AsyncSession,
    *,
    booking: Booking,
    items: Sequence[BookingItem],
    customer: BookingCustomer,
) -> BookingDetail:
    """Persist header, line items and contact snapshot as one unit.

    Either all three are committed or the transaction is rolled back and
    StorageError is raised. The returned detail is re-read from storage.
    """
    if not await identity_service.has_identity_record(session, user_id=booking.user_id):
        raise IdentityMissingError()

    booking.status = BookingStatus.PENDING
    booking.locked_until = lock_service.lock_deadline()
    booking.items = list(items)
    booking.customer = customer

    try:
        # One flush inserts the header before its dependents.
        session.add(booking)
        await session.flush()
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Booking %s write rolled back: %s", booking.id, exc)
        raise StorageError() from exc

    logger.info("Booking %s (%s) created for user %s", booking.code, booking.id, booking.user_id)
    stored = await _load_booking(session, booking.id, refresh=True)
    if stored is None:  # pragma: no cover - committed row vanished
        raise StorageError()
    return build_booking_detail(stored)


async def create_booking(
    session: AsyncSession,
    *,
    renter_id: uuid.UUID,
    payload: BookingCreate,
) -> BookingDetail:
    """Gate on identity, price the basket and write the reservation."""
    if not payload.items:
        raise NoItemsProvidedError()

    identity = await identity_service.require_booking_identity(session, user_id=renter_id)
    quote = pricing_service.quote_booking(
        start_date=payload.start_date,
        end_date=payload.end_date,
        lines=payload.items,
        discount=payload.discount,
    )
    hoster_id = await pricing_service.resolve_booking_hoster(session, lines=payload.items)

    booking_id = uuid.uuid4()
    booking = Booking(
        id=booking_id,
        code=generate_booking_code(),
        hoster_id=hoster_id,
        user_id=renter_id,
        identity_id=identity.id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        delivery_type=payload.delivery_type,
        **quote.to_dict(),
    )
    items = [
        BookingItem(
            id=uuid.uuid4(),
            booking_id=booking_id,
            item_id=line.item_id,
            name=line.name,
            quantity=line.quantity,
            price_per_day=line.price_per_day,
            deposit_per_unit=line.deposit_per_unit,
            subtotal_rental=line.subtotal_rental,
            subtotal_deposit=line.subtotal_deposit,
        )
        for line in payload.items
    ]
    contact = payload.customer
    customer = BookingCustomer(
        id=uuid.uuid4(),
        booking_id=booking_id,
        name=contact.name,
        phone=contact.phone,
        email=contact.email,
        delivery_address=contact.delivery_address or "N/A",
        notes=contact.notes,
    )
    logger.debug(
        "Creating booking for user %s contact=%s/%s",
        renter_id,
        mask_email(contact.email),
        mask_phone(contact.phone),
    )
    return await write_reservation(session, booking=booking, items=items, customer=customer)


async def load_booking_for_actor(
    session: AsyncSession, *, booking_id: uuid.UUID, actor: BookingActor
) -> Booking:
    """Fetch a booking, raising NotFound before checking who may see it."""
    booking = await _load_booking(session, booking_id)
    if booking is None:
        raise BookingNotFoundError(booking_id)
    ensure_booking_access(booking, actor)
    return booking


async def get_booking_detail(
    session: AsyncSession, *, booking_id: uuid.UUID, actor: BookingActor
) -> BookingDetail:
    booking = await load_booking_for_actor(session, booking_id=booking_id, actor=actor)
    return build_booking_detail(booking)


def _summary_fields(booking: Booking, now: datetime) -> dict[str, object]:
    names = [item.name for item in booking.items]
    return {
        "booking_id": booking.id,
        "code": booking.code,
        "start_date": booking.start_date,
        "end_date": booking.end_date,
        "total": booking.total,
        "status": booking.status,
        "item_names": ", ".join(names),
        "total_items": sum(item.quantity for item in booking.items),
        "time_remaining_minutes": lock_service.booking_time_remaining(booking, now),
        "created_at": booking.created_at,
    }


async def list_bookings_for_renter(
    session: AsyncSession, *, renter_id: uuid.UUID
) -> list[BookingSummary]:
    stmt = (
        select(Booking)
        .options(selectinload(Booking.items))
        .where(Booking.user_id == renter_id)
        .order_by(Booking.created_at.desc())
    )
    bookings = (await session.execute(stmt)).scalars().unique().all()
    now = datetime.now(UTC)
    return [BookingSummary(**_summary_fields(booking, now)) for booking in bookings]


async def list_bookings_for_owner(
    session: AsyncSession, *, owner_id: uuid.UUID
) -> list[OwnerBookingSummary]:
    stmt = (
        select(Booking)
        .options(
            selectinload(Booking.items),
            selectinload(Booking.customer),
            selectinload(Booking.renter),
        )
        .where(Booking.hoster_id == owner_id)
        .order_by(Booking.created_at.desc())
    )
    bookings = (await session.execute(stmt)).scalars().unique().all()
    now = datetime.now(UTC)
    summaries: list[OwnerBookingSummary] = []
    for booking in bookings:
        customer_name = booking.customer.name if booking.customer else ""
        if not customer_name and booking.renter is not None:
            customer_name = booking.renter.full_name
        summaries.append(
            OwnerBookingSummary(**_summary_fields(booking, now), customer_name=customer_name)
        )
    return summaries


def _completeness(booking: Booking) -> tuple[bool, bool]:
    has_identity = booking.identity_id is not None
    return (booking.customer is not None and has_identity, has_identity)


async def list_distinct_customers_for_owner(
    session: AsyncSession, *, owner_id: uuid.UUID
) -> list[CustomerInfo]:
    """One entry per renter, taken from their most complete and recent booking."""
    stmt = (
        select(Booking)
        .options(
            selectinload(Booking.customer),
            selectinload(Booking.identity),
            selectinload(Booking.renter),
        )
        .where(Booking.hoster_id == owner_id)
        .order_by(Booking.created_at.desc())
    )
    bookings = (await session.execute(stmt)).scalars().unique().all()

    chosen: dict[uuid.UUID, Booking] = {}
    for booking in bookings:
        current = chosen.get(booking.user_id)
        if current is None or _completeness(booking) > _completeness(current):
            chosen[booking.user_id] = booking

    customers: list[CustomerInfo] = []
    for user_id, booking in chosen.items():
        snapshot = booking.customer
        renter = booking.renter
        identity = booking.identity
        customers.append(
            CustomerInfo(
                user_id=user_id,
                full_name=snapshot.name if snapshot else renter.full_name,
                email=snapshot.email if snapshot else renter.email,
                phone_number=(
                    snapshot.phone if snapshot else (renter.phone_number or "")
                ),
                ktp_id=booking.identity_id,
                ktp_photo=identity.ktp_url if identity else None,
                status=identity.status if identity else None,
                reason=identity.reason if identity else None,
                uploaded_at=(
                    identity.created_at if identity else (snapshot.created_at if snapshot else None)
                ),
            )
        )
    return customers
