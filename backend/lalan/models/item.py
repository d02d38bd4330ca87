"""Catalog item owned by a hoster."""
from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lalan.db.base import Base
from lalan.models.mixins import TimestampMixin


class Item(TimestampMixin, Base):
    """Rentable catalog entry. Only the owner lookup is used by bookings."""

    __tablename__ = "items"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    hoster_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price_per_day: Mapped[int] = mapped_column(Integer, nullable=False)
    deposit_per_unit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    hoster: Mapped["User"] = relationship("User", back_populates="items")
