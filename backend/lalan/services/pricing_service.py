"""Rental duration, booking totals and hoster resolution."""
from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lalan.models.item import Item
from lalan.services.errors import (
    HosterUnresolvedError,
    InvalidDateRangeError,
    MixedHosterBasketError,
    NoItemsProvidedError,
)


class PricedLine(Protocol):
    """Anything carrying caller-computed subtotals for one catalog item."""

    item_id: uuid.UUID
    subtotal_rental: int
    subtotal_deposit: int


@dataclass(frozen=True, slots=True)
class BookingQuote:
    """Computed duration and money fields for a new booking."""

    total_days: int
    rental: int
    deposit: int
    discount: int
    total: int
    outstanding: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total_days": self.total_days,
            "rental": self.rental,
            "deposit": self.deposit,
            "discount": self.discount,
            "total": self.total,
            "outstanding": self.outstanding,
        }


def rental_days(start_date: date, end_date: date) -> int:
    """Whole calendar days between the two dates."""
    return (end_date - start_date).days


def quote_booking(
    *,
    start_date: date,
    end_date: date,
    lines: Sequence[PricedLine],
    discount: int = 0,
) -> BookingQuote:
    """Sum the caller-supplied subtotals into booking totals.

    Subtotals are trusted as given; they are not recomputed from unit prices.
    """
    if not lines:
        raise NoItemsProvidedError()
    if end_date <= start_date:
        raise InvalidDateRangeError()

    rental = sum(line.subtotal_rental for line in lines)
    deposit = sum(line.subtotal_deposit for line in lines)
    total = rental + deposit - discount
    return BookingQuote(
        total_days=rental_days(start_date, end_date),
        rental=rental,
        deposit=deposit,
        discount=discount,
        total=total,
        outstanding=total,
    )


async def resolve_owner_of_item(
    session: AsyncSession, *, item_id: uuid.UUID
) -> uuid.UUID | None:
    """Return the hoster owning ``item_id``, or None when the item is unknown."""
    result = await session.execute(select(Item.hoster_id).where(Item.id == item_id))
    return result.scalar_one_or_none()


async def resolve_booking_hoster(
    session: AsyncSession, *, lines: Sequence[PricedLine]
) -> uuid.UUID:
    """Derive the booking's hoster from the first item and check the rest agree."""
    if not lines:
        raise NoItemsProvidedError()

    first_item_id = lines[0].item_id
    hoster_id = await resolve_owner_of_item(session, item_id=first_item_id)
    if hoster_id is None:
        raise HosterUnresolvedError(first_item_id)

    for line in lines[1:]:
        owner = await resolve_owner_of_item(session, item_id=line.item_id)
        if owner is None:
            raise HosterUnresolvedError(line.item_id)
        if owner != hoster_id:
            raise MixedHosterBasketError(line.item_id)
    return hoster_id
