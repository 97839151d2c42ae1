# backend/alembic/versions/001_scheduling_engine.py
"""Scheduling engine - catalog, staff, bookings and notification log

Revision ID: 001_scheduling_engine
Revises:
Create Date: 2026-10-17 00:00:00.000000

Bookings snapshot the service name and duration. The partial unique index
on (staff_id, booking_date, booking_time) for non-cancelled rows is what
makes double-booking impossible under concurrent requests; the partial
unique index on (booking_id, kind) for sent notifications is what keeps
reminder runs idempotent.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_scheduling_engine"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create scheduling tables."""
    print("Creating scheduling engine tables...")

    op.create_table(
        "services",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(60), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=True,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("duration_minutes > 0", name="check_service_duration_positive"),
        sa.CheckConstraint("price >= 0", name="check_service_price_non_negative"),
    )
    op.create_index("ix_services_id", "services", ["id"])
    op.create_index("ix_services_category", "services", ["category"])

    op.create_table(
        "staff",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_staff_id", "staff", ["id"])

    op.create_table(
        "staff_services",
        sa.Column("staff_id", sa.String(26), nullable=False),
        sa.Column("service_id", sa.String(26), nullable=False),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("staff_id", "service_id"),
    )

    op.create_table(
        "staff_working_hours",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("staff_id", sa.String(26), nullable=False),
        sa.Column("weekday", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("weekday >= 0 AND weekday <= 6", name="check_weekday_range"),
        sa.CheckConstraint("start_time < end_time", name="check_working_hours_order"),
    )
    op.create_index("ix_staff_working_hours_staff_id", "staff_working_hours", ["staff_id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("service_id", sa.String(26), nullable=False),
        sa.Column("staff_id", sa.String(26), nullable=False),
        sa.Column("customer_id", sa.String(64), nullable=False),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("booking_time", sa.Time(), nullable=False),
        # Service snapshot
        sa.Column("service_name", sa.String(120), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        # Contact details
        sa.Column("customer_name", sa.String(120), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False),
        sa.Column("customer_phone", sa.String(40), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=True,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_by_id", sa.String(64), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"]),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed', 'no_show')",
            name="ck_bookings_status",
        ),
        sa.CheckConstraint("duration_minutes > 0", name="check_duration_positive"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_customer_id", "bookings", ["customer_id"])
    op.create_index("ix_bookings_booking_date", "bookings", ["booking_date"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("ix_bookings_date_status", "bookings", ["booking_date", "status"])

    # One active booking per staff member per start time
    op.create_index(
        "uq_bookings_staff_slot_active",
        "bookings",
        ["staff_id", "booking_date", "booking_time"],
        unique=True,
        postgresql_where=sa.text("status <> 'cancelled'"),
        sqlite_where=sa.text("status <> 'cancelled'"),
    )

    op.create_table(
        "notification_logs",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("booking_id", sa.String(26), nullable=True),
        sa.Column("kind", sa.String(50), nullable=False),
        sa.Column("recipient", sa.String(255), nullable=False),
        sa.Column("subject", sa.String(255), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("status IN ('sent', 'failed')", name="ck_notification_logs_status"),
    )
    op.create_index("ix_notification_logs_booking_id", "notification_logs", ["booking_id"])
    op.create_index("ix_notification_logs_created_at", "notification_logs", ["created_at"])

    # At most one successful delivery per (booking, kind)
    op.create_index(
        "uq_notification_logs_sent",
        "notification_logs",
        ["booking_id", "kind"],
        unique=True,
        postgresql_where=sa.text("status = 'sent'"),
        sqlite_where=sa.text("status = 'sent'"),
    )

    print("Scheduling engine tables created successfully!")


def downgrade() -> None:
    """Drop scheduling tables."""
    print("Dropping scheduling engine tables...")

    op.drop_index("uq_notification_logs_sent", table_name="notification_logs")
    op.drop_index("ix_notification_logs_created_at", table_name="notification_logs")
    op.drop_index("ix_notification_logs_booking_id", table_name="notification_logs")
    op.drop_table("notification_logs")

    op.drop_index("uq_bookings_staff_slot_active", table_name="bookings")
    op.drop_index("ix_bookings_date_status", table_name="bookings")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_booking_date", table_name="bookings")
    op.drop_index("ix_bookings_customer_id", table_name="bookings")
    op.drop_index("ix_bookings_id", table_name="bookings")
    op.drop_table("bookings")

    op.drop_index("ix_staff_working_hours_staff_id", table_name="staff_working_hours")
    op.drop_table("staff_working_hours")
    op.drop_table("staff_services")
    op.drop_index("ix_staff_id", table_name="staff")
    op.drop_table("staff")
    op.drop_index("ix_services_category", table_name="services")
    op.drop_index("ix_services_id", table_name="services")
    op.drop_table("services")

    print("Scheduling engine tables dropped.")
