"""Seed a hoster, one rentable item and a verified customer for local testing."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime

from sqlalchemy import select

from lalan.core.config import get_settings
from lalan.core.security import create_access_token
from lalan.db.session import get_sessionmaker
from lalan.models import Identity, IdentityStatus, Item, User, UserRole

HOSTER_EMAIL = "hoster@lalan.local"
CUSTOMER_EMAIL = "customer@lalan.local"


async def _get_or_create_user(session, *, email: str, full_name: str, role: UserRole) -> User:
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is not None:
        print(f"User {email} already exists")
        return user
    user = User(email=email, full_name=full_name, phone_number="081200000000", role=role)
    session.add(user)
    await session.flush()
    return user


async def main() -> None:
    settings = get_settings()
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        hoster = await _get_or_create_user(
            session, email=HOSTER_EMAIL, full_name="Dev Hoster", role=UserRole.HOSTER
        )
        customer = await _get_or_create_user(
            session, email=CUSTOMER_EMAIL, full_name="Dev Customer", role=UserRole.CUSTOMER
        )

        item = (
            await session.execute(select(Item).where(Item.hoster_id == hoster.id))
        ).scalars().first()
        if item is None:
            item = Item(
                hoster_id=hoster.id,
                name="Tenda Dome 4P",
                price_per_day=100_000,
                deposit_per_unit=200_000,
            )
            session.add(item)

        identity = (
            await session.execute(
                select(Identity).where(
                    Identity.user_id == customer.id, Identity.verified.is_(True)
                )
            )
        ).scalars().first()
        if identity is None:
            session.add(
                Identity(
                    user_id=customer.id,
                    ktp_url="https://storage.lalan.local/ktp/dev-customer.jpg",
                    verified=True,
                    status=IdentityStatus.APPROVED,
                    verified_at=datetime.now(UTC),
                )
            )

        await session.commit()

        print(f"Item {item.id} ({item.name}) owned by {hoster.email}")
        print(f"Hoster token:   {create_access_token(str(hoster.id))}")
        print(f"Customer token: {create_access_token(str(customer.id))}")


if __name__ == "__main__":
    asyncio.run(main())
