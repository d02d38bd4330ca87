"""Identity (KTP) lookups used to gate new bookings."""
from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lalan.models.identity import Identity, IdentityStatus
from lalan.services.errors import (
    IdentityMissingError,
    IdentityPendingError,
    IdentityRejectedError,
)

logger = logging.getLogger(__name__)


async def resolve_verified_identity(
    session: AsyncSession, *, user_id: uuid.UUID
) -> Identity | None:
    """Return the most recently verified identity for ``user_id``."""
    stmt = (
        select(Identity)
        .where(Identity.user_id == user_id, Identity.verified.is_(True))
        .order_by(
            Identity.verified_at.desc().nulls_last(),
            Identity.created_at.desc(),
        )
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def latest_identity(
    session: AsyncSession, *, user_id: uuid.UUID
) -> Identity | None:
    """Return the most recently uploaded identity for ``user_id``."""
    stmt = (
        select(Identity)
        .where(Identity.user_id == user_id)
        .order_by(Identity.created_at.desc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def has_identity_record(session: AsyncSession, *, user_id: uuid.UUID) -> bool:
    stmt = select(func.count()).select_from(Identity).where(Identity.user_id == user_id)
    return (await session.execute(stmt)).scalar_one() > 0


async def require_booking_identity(
    session: AsyncSession, *, user_id: uuid.UUID
) -> Identity:
    """Return the identity a new booking should reference.

    A verified record always wins. Otherwise the latest upload decides the
    failure: none at all, still pending review, or rejected with the admin's
    reason.
    """
    verified = await resolve_verified_identity(session, user_id=user_id)
    if verified is not None:
        return verified

    latest = await latest_identity(session, user_id=user_id)
    if latest is None:
        raise IdentityMissingError()
    if latest.status == IdentityStatus.REJECTED:
        logger.info("Booking blocked for user %s: identity %s rejected", user_id, latest.id)
        raise IdentityRejectedError(latest.reason)
    raise IdentityPendingError()
