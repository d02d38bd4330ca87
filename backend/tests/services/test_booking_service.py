"""Tests for booking creation, reads and listings."""

from __future__ import annotations

import re
import uuid
from datetime import UTC, date, datetime

import pytest
from sqlalchemy import func, select, text

from lalan.db.session import get_sessionmaker
from lalan.models import (
    Booking,
    BookingCustomer,
    BookingItem,
    BookingStatus,
    DeliveryType,
)
from lalan.schemas.booking import BookingCreate
from lalan.security.ownership import BookingActor
from lalan.services import booking_service, status_service
from lalan.services.errors import (
    BookingNotFoundError,
    IdentityMissingError,
    IdentityPendingError,
    IdentityRejectedError,
    InvalidDateRangeError,
    MixedHosterBasketError,
    NoItemsProvidedError,
    StorageError,
    UnauthorizedError,
)

pytestmark = pytest.mark.asyncio


def _payload(*item_ids: uuid.UUID, **overrides: object) -> BookingCreate:
    data: dict[str, object] = {
        "start_date": date(2025, 12, 20),
        "end_date": date(2025, 12, 25),
        "delivery_type": "pickup",
        "items": [
            {
                "item_id": str(item_id),
                "name": f"Item {index}",
                "quantity": 2,
                "price_per_day": 100_000,
                "deposit_per_unit": 500_000,
                "subtotal_rental": 1_000_000,
                "subtotal_deposit": 1_000_000,
            }
            for index, item_id in enumerate(item_ids)
        ],
        "customer": {
            "name": "Rani Renter",
            "phone": "081299990000",
            "email": "rani@example.com",
            "delivery_address": "Jl. Merdeka 1, Bandung",
        },
    }
    data.update(overrides)
    return BookingCreate.model_validate(data)


async def _count(session, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


async def test_create_booking_persists_header_items_and_snapshot(
    seeded: dict[str, object], db_url: str
) -> None:
    async with get_sessionmaker(db_url)() as session:
        detail = await booking_service.create_booking(
            session,
            renter_id=seeded["customer_id"],
            payload=_payload(seeded["tent_id"]),
        )

    booking = detail.booking
    assert re.fullmatch(r"BK-\d{8}-[A-Z0-9]{6}", booking.code)
    assert booking.status == BookingStatus.PENDING
    assert booking.hoster_id == seeded["hoster_id"]
    assert booking.user_id == seeded["customer_id"]
    assert booking.identity_id == seeded["identity_id"]
    assert booking.total_days == 5
    assert booking.rental == 1_000_000
    assert booking.deposit == 1_000_000
    assert booking.total == 2_000_000
    assert booking.outstanding == booking.total
    assert 0 < booking.time_remaining_minutes <= 30

    assert len(detail.items) == 1
    assert detail.items[0].booking_id == booking.id
    assert detail.items[0].subtotal_rental == 1_000_000
    assert detail.customer is not None
    assert detail.customer.email == "rani@example.com"
    assert detail.identity is not None
    assert detail.identity.verified is True


async def test_contact_snapshot_is_encrypted_at_rest(
    seeded: dict[str, object], db_url: str
) -> None:
    async with get_sessionmaker(db_url)() as session:
        detail = await booking_service.create_booking(
            session,
            renter_id=seeded["customer_id"],
            payload=_payload(seeded["tent_id"]),
        )
        raw = (
            await session.execute(
                text(
                    "SELECT phone, email, delivery_address FROM booking_customers "
                    "WHERE booking_id = :booking_id"
                ),
                {"booking_id": detail.booking.id.hex},
            )
        ).one()
    assert all(value.startswith("enc:") for value in raw)
    assert "rani@example.com" not in raw.email


async def test_prefix_lookalike_contact_is_sealed_and_read_back(
    seeded: dict[str, object], db_url: str
) -> None:
    payload = _payload(seeded["tent_id"])
    payload.customer.delivery_address = "enc:Jl. Merdeka 1"
    async with get_sessionmaker(db_url)() as session:
        created = await booking_service.create_booking(
            session, renter_id=seeded["customer_id"], payload=payload
        )
        stored = (
            await session.execute(
                text(
                    "SELECT delivery_address FROM booking_customers "
                    "WHERE booking_id = :booking_id"
                ),
                {"booking_id": created.booking.id.hex},
            )
        ).scalar_one()
    assert stored != "enc:Jl. Merdeka 1"

    async with get_sessionmaker(db_url)() as session:
        detail = await booking_service.get_booking_detail(
            session,
            booking_id=created.booking.id,
            actor=BookingActor.owner(seeded["hoster_id"]),
        )
        customers = await booking_service.list_distinct_customers_for_owner(
            session, owner_id=seeded["hoster_id"]
        )
    assert detail.customer is not None
    assert detail.customer.delivery_address == "enc:Jl. Merdeka 1"
    assert customers[0].email == "rani@example.com"


async def test_empty_delivery_address_is_stored_as_placeholder(
    seeded: dict[str, object], db_url: str
) -> None:
    payload = _payload(seeded["tent_id"])
    payload.customer.delivery_address = ""
    async with get_sessionmaker(db_url)() as session:
        detail = await booking_service.create_booking(
            session, renter_id=seeded["customer_id"], payload=payload
        )
    assert detail.customer is not None
    assert detail.customer.delivery_address == "N/A"


async def test_empty_items_rejected_before_identity_check(
    seeded: dict[str, object], db_url: str
) -> None:
    async with get_sessionmaker(db_url)() as session:
        with pytest.raises(NoItemsProvidedError):
            await booking_service.create_booking(
                session,
                renter_id=seeded["no_identity_customer_id"],
                payload=_payload(end_date=date(2025, 1, 1)),
            )
        assert await _count(session, Booking) == 0


@pytest.mark.parametrize(
    ("renter_key", "error"),
    [
        ("no_identity_customer_id", IdentityMissingError),
        ("pending_customer_id", IdentityPendingError),
        ("rejected_customer_id", IdentityRejectedError),
    ],
)
async def test_identity_gate_blocks_unverified_renters(
    seeded: dict[str, object], db_url: str, renter_key: str, error: type[Exception]
) -> None:
    async with get_sessionmaker(db_url)() as session:
        with pytest.raises(error):
            await booking_service.create_booking(
                session,
                renter_id=seeded[renter_key],
                payload=_payload(seeded["tent_id"]),
            )
        assert await _count(session, Booking) == 0


async def test_invalid_dates_and_mixed_basket_write_nothing(
    seeded: dict[str, object], db_url: str
) -> None:
    async with get_sessionmaker(db_url)() as session:
        with pytest.raises(InvalidDateRangeError):
            await booking_service.create_booking(
                session,
                renter_id=seeded["customer_id"],
                payload=_payload(seeded["tent_id"], end_date=date(2025, 12, 20)),
            )
        with pytest.raises(MixedHosterBasketError):
            await booking_service.create_booking(
                session,
                renter_id=seeded["customer_id"],
                payload=_payload(seeded["tent_id"], seeded["kayak_id"]),
            )
        assert await _count(session, Booking) == 0
        assert await _count(session, BookingItem) == 0


async def test_write_reservation_rolls_back_on_partial_failure(
    seeded: dict[str, object], db_url: str
) -> None:
    booking_id = uuid.uuid4()
    booking = Booking(
        id=booking_id,
        code=booking_service.generate_booking_code(),
        hoster_id=seeded["hoster_id"],
        user_id=seeded["customer_id"],
        identity_id=seeded["identity_id"],
        start_date=date(2025, 12, 20),
        end_date=date(2025, 12, 21),
        delivery_type=DeliveryType.PICKUP,
        total_days=1,
        rental=100_000,
        deposit=0,
        discount=0,
        total=100_000,
        outstanding=100_000,
    )
    # A line item without a name violates NOT NULL after the header is flushed.
    broken_item = BookingItem(
        booking_id=booking_id,
        item_id=seeded["tent_id"],
        name=None,
        quantity=1,
        price_per_day=100_000,
        deposit_per_unit=0,
        subtotal_rental=100_000,
        subtotal_deposit=0,
    )
    customer = BookingCustomer(
        booking_id=booking_id,
        name="Rani Renter",
        phone="081299990000",
        email="rani@example.com",
        delivery_address="N/A",
    )

    async with get_sessionmaker(db_url)() as session:
        with pytest.raises(StorageError):
            await booking_service.write_reservation(
                session, booking=booking, items=[broken_item], customer=customer
            )

    async with get_sessionmaker(db_url)() as session:
        assert await _count(session, Booking) == 0
        assert await _count(session, BookingItem) == 0
        assert await _count(session, BookingCustomer) == 0


async def test_detail_access_rules(seeded: dict[str, object], db_url: str) -> None:
    async with get_sessionmaker(db_url)() as session:
        created = await booking_service.create_booking(
            session,
            renter_id=seeded["customer_id"],
            payload=_payload(seeded["tent_id"]),
        )
        booking_id = created.booking.id

    async with get_sessionmaker(db_url)() as session:
        as_owner = await booking_service.get_booking_detail(
            session, booking_id=booking_id, actor=BookingActor.owner(seeded["hoster_id"])
        )
        assert as_owner.booking.id == booking_id

        with pytest.raises(UnauthorizedError):
            await booking_service.get_booking_detail(
                session,
                booking_id=booking_id,
                actor=BookingActor.owner(seeded["other_hoster_id"]),
            )
        with pytest.raises(UnauthorizedError):
            await booking_service.get_booking_detail(
                session,
                booking_id=booking_id,
                actor=BookingActor.renter(seeded["pending_customer_id"]),
            )
        with pytest.raises(BookingNotFoundError):
            await booking_service.get_booking_detail(
                session,
                booking_id=uuid.uuid4(),
                actor=BookingActor.owner(seeded["other_hoster_id"]),
            )


async def test_listings_for_renter_and_owner(seeded: dict[str, object], db_url: str) -> None:
    async with get_sessionmaker(db_url)() as session:
        await booking_service.create_booking(
            session,
            renter_id=seeded["customer_id"],
            payload=_payload(seeded["tent_id"], seeded["stove_id"]),
        )
        await booking_service.create_booking(
            session,
            renter_id=seeded["customer_id"],
            payload=_payload(seeded["kayak_id"]),
        )

    async with get_sessionmaker(db_url)() as session:
        mine = await booking_service.list_bookings_for_renter(
            session, renter_id=seeded["customer_id"]
        )
        hosted = await booking_service.list_bookings_for_owner(
            session, owner_id=seeded["hoster_id"]
        )
        nothing = await booking_service.list_bookings_for_renter(
            session, renter_id=seeded["pending_customer_id"]
        )

    assert len(mine) == 2
    assert all(0 < summary.time_remaining_minutes <= 30 for summary in mine)
    assert len(hosted) == 1
    assert hosted[0].total_items == 4
    assert set(hosted[0].item_names.split(", ")) == {"Item 0", "Item 1"}
    assert hosted[0].customer_name == "Rani Renter"
    assert nothing == []


async def test_distinct_customers_for_owner(seeded: dict[str, object], db_url: str) -> None:
    async with get_sessionmaker(db_url)() as session:
        for _ in range(2):
            await booking_service.create_booking(
                session,
                renter_id=seeded["customer_id"],
                payload=_payload(seeded["tent_id"]),
            )

    async with get_sessionmaker(db_url)() as session:
        customers = await booking_service.list_distinct_customers_for_owner(
            session, owner_id=seeded["hoster_id"]
        )
        others = await booking_service.list_distinct_customers_for_owner(
            session, owner_id=seeded["other_hoster_id"]
        )

    assert len(customers) == 1
    info = customers[0]
    assert info.user_id == seeded["customer_id"]
    assert info.full_name == "Rani Renter"
    assert info.email == "rani@example.com"
    assert info.ktp_id == seeded["identity_id"]
    assert info.ktp_photo == "https://files.example.com/ktp/rani.jpg"
    assert others == []


async def test_generate_booking_code_uses_date_stamp() -> None:
    code = booking_service.generate_booking_code(datetime(2025, 12, 20, tzinfo=UTC))
    assert code.startswith("BK-20251220-")
    assert len(code) == len("BK-20251220-") + 6


async def test_lock_countdown_stops_once_booking_leaves_pending(
    seeded: dict[str, object], db_url: str
) -> None:
    async with get_sessionmaker(db_url)() as session:
        created = await booking_service.create_booking(
            session,
            renter_id=seeded["customer_id"],
            payload=_payload(seeded["tent_id"]),
        )
    renter = BookingActor.renter(seeded["customer_id"])
    async with get_sessionmaker(db_url)() as session:
        await status_service.cancel_booking(
            session, actor=renter, booking_id=created.booking.id
        )

    async with get_sessionmaker(db_url)() as session:
        detail = await booking_service.get_booking_detail(
            session, booking_id=created.booking.id, actor=renter
        )
        mine = await booking_service.list_bookings_for_renter(
            session, renter_id=seeded["customer_id"]
        )
        hosted = await booking_service.list_bookings_for_owner(
            session, owner_id=seeded["hoster_id"]
        )
    assert detail.booking.status == BookingStatus.CANCELLED
    assert detail.booking.time_remaining_minutes == 0
    assert mine[0].time_remaining_minutes == 0
    assert hosted[0].time_remaining_minutes == 0
