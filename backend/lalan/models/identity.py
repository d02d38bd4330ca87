"""Identity (KTP) verification records uploaded by renters."""
from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lalan.db.base import Base
from lalan.models.mixins import TimestampMixin


class IdentityStatus(str, enum.Enum):
    """Review outcome of an uploaded identity document."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Identity(TimestampMixin, Base):
    """One upload attempt; a user may have many."""

    __tablename__ = "identities"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ktp_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    status: Mapped[IdentityStatus] = mapped_column(
        Enum(
            IdentityStatus,
            name="identity_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        default=IdentityStatus.PENDING,
        nullable=False,
        index=True,
    )
    reason: Mapped[str | None] = mapped_column(Text)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    user: Mapped["User"] = relationship("User", back_populates="identities")
