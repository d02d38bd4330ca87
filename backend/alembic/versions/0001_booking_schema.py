"""Users, catalog items, identities and bookings.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


user_role = sa.Enum("ADMIN", "HOSTER", "CUSTOMER", name="userrole")
user_status = sa.Enum("ACTIVE", "SUSPENDED", name="userstatus")
identity_status = sa.Enum("pending", "approved", "rejected", name="identity_status")
booking_status = sa.Enum(
    "pending",
    "on_progress",
    "on_rent",
    "completed",
    "cancelled",
    name="booking_status",
)
delivery_type = sa.Enum("pickup", "delivery", name="delivery_type")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("phone_number", sa.String(length=32)),
        sa.Column("role", user_role, nullable=False),
        sa.Column("status", user_status, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "items",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "hoster_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("price_per_day", sa.Integer(), nullable=False),
        sa.Column("deposit_per_unit", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_items_hoster_id", "items", ["hoster_id"])

    op.create_table(
        "identities",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("ktp_url", sa.String(length=1024), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False),
        sa.Column("status", identity_status, nullable=False),
        sa.Column("reason", sa.Text()),
        sa.Column("verified_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index("ix_identities_user_id", "identities", ["user_id"])
    op.create_index("ix_identities_status", "identities", ["status"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("code", sa.String(length=32), nullable=False, unique=True),
        sa.Column(
            "hoster_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id"),
            nullable=False,
        ),
        sa.Column(
            "identity_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("identities.id", ondelete="SET NULL"),
        ),
        sa.Column("status", booking_status, nullable=False),
        sa.Column("locked_until", sa.DateTime(timezone=True), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("total_days", sa.Integer(), nullable=False),
        sa.Column("delivery_type", delivery_type, nullable=False),
        sa.Column("rental", sa.Integer(), nullable=False),
        sa.Column("deposit", sa.Integer(), nullable=False),
        sa.Column("discount", sa.Integer(), nullable=False),
        sa.Column("total", sa.Integer(), nullable=False),
        sa.Column("outstanding", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_bookings_hoster_id", "bookings", ["hoster_id"])
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("ix_bookings_start_date", "bookings", ["start_date"])
    op.create_index("ix_bookings_end_date", "bookings", ["end_date"])

    op.create_table(
        "booking_items",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "booking_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("bookings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "item_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("items.id"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price_per_day", sa.Integer(), nullable=False),
        sa.Column("deposit_per_unit", sa.Integer(), nullable=False),
        sa.Column("subtotal_rental", sa.Integer(), nullable=False),
        sa.Column("subtotal_deposit", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_booking_items_booking_id", "booking_items", ["booking_id"])
    op.create_index("ix_booking_items_item_id", "booking_items", ["item_id"])

    op.create_table(
        "booking_customers",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "booking_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("bookings.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=512), nullable=False),
        sa.Column("email", sa.String(length=512), nullable=False),
        sa.Column("delivery_address", sa.String(length=2048), nullable=False),
        sa.Column("notes", sa.String(length=1024)),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("booking_customers")
    op.drop_index("ix_booking_items_item_id", table_name="booking_items")
    op.drop_index("ix_booking_items_booking_id", table_name="booking_items")
    op.drop_table("booking_items")
    for index_name in (
        "ix_bookings_end_date",
        "ix_bookings_start_date",
        "ix_bookings_status",
        "ix_bookings_user_id",
        "ix_bookings_hoster_id",
    ):
        op.drop_index(index_name, table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("ix_identities_status", table_name="identities")
    op.drop_index("ix_identities_user_id", table_name="identities")
    op.drop_table("identities")
    op.drop_index("ix_items_hoster_id", table_name="items")
    op.drop_table("items")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (delivery_type, booking_status, identity_status, user_status, user_role):
        enum_type.drop(bind, checkfirst=True)
