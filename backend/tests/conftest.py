"""Test fixtures for the Lalan booking backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault(
    "APP_ENCRYPTION_KEY", "MDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDA="
)

from lalan.core.config import get_settings
from lalan.core.security import create_access_token
from lalan.db.base import Base
from lalan.db.session import dispose_engine, get_sessionmaker
from lalan.main import app
from lalan.models import (
    Identity,
    IdentityStatus,
    Item,
    User,
    UserRole,
    UserStatus,
)


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def seeded(reset_database: None, db_url: str) -> dict[str, object]:
    """Seed hosters, their items and renters in each identity state."""
    sessionmaker = get_sessionmaker(db_url)
    now = datetime.now(UTC)

    async with sessionmaker() as session:
        hoster = User(
            email="hoster@example.com",
            full_name="Hana Hoster",
            phone_number="081211110000",
            role=UserRole.HOSTER,
            status=UserStatus.ACTIVE,
        )
        other_hoster = User(
            email="other.hoster@example.com",
            full_name="Oscar Hoster",
            role=UserRole.HOSTER,
            status=UserStatus.ACTIVE,
        )
        customer = User(
            email="rani@example.com",
            full_name="Rani Renter",
            phone_number="081299990000",
            role=UserRole.CUSTOMER,
            status=UserStatus.ACTIVE,
        )
        no_identity_customer = User(
            email="nadia@example.com",
            full_name="Nadia NoKtp",
            role=UserRole.CUSTOMER,
            status=UserStatus.ACTIVE,
        )
        rejected_customer = User(
            email="rudi@example.com",
            full_name="Rudi Rejected",
            role=UserRole.CUSTOMER,
            status=UserStatus.ACTIVE,
        )
        pending_customer = User(
            email="putri@example.com",
            full_name="Putri Pending",
            role=UserRole.CUSTOMER,
            status=UserStatus.ACTIVE,
        )
        session.add_all(
            [
                hoster,
                other_hoster,
                customer,
                no_identity_customer,
                rejected_customer,
                pending_customer,
            ]
        )
        await session.flush()

        tent = Item(
            hoster_id=hoster.id,
            name="Tenda Dome 4P",
            price_per_day=100_000,
            deposit_per_unit=500_000,
        )
        stove = Item(
            hoster_id=hoster.id,
            name="Kompor Portable",
            price_per_day=25_000,
            deposit_per_unit=50_000,
        )
        kayak = Item(
            hoster_id=other_hoster.id,
            name="Kayak",
            price_per_day=300_000,
            deposit_per_unit=1_000_000,
        )
        session.add_all([tent, stove, kayak])

        approved_identity = Identity(
            user_id=customer.id,
            ktp_url="https://files.example.com/ktp/rani.jpg",
            verified=True,
            status=IdentityStatus.APPROVED,
            verified_at=now - timedelta(days=1),
        )
        rejected_identity = Identity(
            user_id=rejected_customer.id,
            ktp_url="https://files.example.com/ktp/rudi.jpg",
            verified=False,
            status=IdentityStatus.REJECTED,
            reason="Foto KTP buram",
        )
        pending_identity = Identity(
            user_id=pending_customer.id,
            ktp_url="https://files.example.com/ktp/putri.jpg",
            verified=False,
            status=IdentityStatus.PENDING,
        )
        session.add_all([approved_identity, rejected_identity, pending_identity])
        await session.commit()

        return {
            "hoster_id": hoster.id,
            "other_hoster_id": other_hoster.id,
            "customer_id": customer.id,
            "customer_email": customer.email,
            "no_identity_customer_id": no_identity_customer.id,
            "rejected_customer_id": rejected_customer.id,
            "pending_customer_id": pending_customer.id,
            "identity_id": approved_identity.id,
            "tent_id": tent.id,
            "stove_id": stove.id,
            "kayak_id": kayak.id,
        }


def _bearer(user_id: object) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(str(user_id))}"}


@pytest_asyncio.fixture()
async def app_context(seeded: dict[str, object]) -> AsyncIterator[dict[str, object]]:
    """Yield an async client, seeded ids and bearer headers per user."""
    context = dict(seeded)
    context["hoster_headers"] = _bearer(seeded["hoster_id"])
    context["other_hoster_headers"] = _bearer(seeded["other_hoster_id"])
    context["customer_headers"] = _bearer(seeded["customer_id"])
    context["no_identity_headers"] = _bearer(seeded["no_identity_customer_id"])
    context["rejected_headers"] = _bearer(seeded["rejected_customer_id"])
    context["pending_headers"] = _bearer(seeded["pending_customer_id"])

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        yield context
