from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
)

metadata = MetaData()


class UTCDateTime(TypeDecorator):
    """Stores UTC; returns timezone-aware datetimes even on backends that drop tzinfo (SQLite)."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value: datetime | None, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


bookings = Table(
    "bookings",
    metadata,
    Column("id", String(40), primary_key=True),
    Column("user_id", String(64), nullable=False, index=True),
    Column("trailer_id", String(64), nullable=False, index=True),
    Column("start_time", UTCDateTime, nullable=False),
    Column("end_time", UTCDateTime, nullable=False),
    Column("rental_type", String(16), nullable=False),
    Column("add_ons", String(255), nullable=False, default=""),
    Column("base_cost", Numeric(12, 2), nullable=False),
    Column("add_on_cost", Numeric(12, 2), nullable=False),
    Column("deposit_amount", Numeric(12, 2), nullable=False),
    Column("total_amount", Numeric(12, 2), nullable=False),
    Column("currency_code", String(3), nullable=False),
    Column("status", String(32), nullable=False),
    Column("lock_version", Integer, nullable=False, default=0),
    Column("created_at", UTCDateTime),
    Column("updated_at", UTCDateTime),
)

payments = Table(
    "payments",
    metadata,
    Column("id", String(40), primary_key=True),
    Column("booking_id", String(40), nullable=False, index=True),
    Column("order_id", String(50), nullable=False, unique=True),
    Column("kind", String(16), nullable=False),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("currency_code", String(3), nullable=False),
    Column("gateway_payment_id", String(64), unique=True),
    Column("redirect_url", String(500)),
    Column("provider_status", String(32)),
    Column("status", String(16), nullable=False),
    Column("created_at", UTCDateTime),
    Column("updated_at", UTCDateTime),
)

booking_photos = Table(
    "booking_photos",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("booking_id", String(40), nullable=False),
    Column("phase", String(16), nullable=False),
    Column("side", String(8), nullable=False),
    Column("photo_ref", String(500), nullable=False),
    Column("created_at", UTCDateTime),
    Column("updated_at", UTCDateTime),
    UniqueConstraint("booking_id", "phase", "side", name="uq_booking_photos_side"),
)

damage_verdicts = Table(
    "damage_verdicts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("booking_id", String(40), nullable=False),
    Column("side", String(8), nullable=False),
    Column("has_damage", Boolean, nullable=False),
    Column("level", String(16), nullable=False),
    Column("confidence", Float, nullable=False),
    Column("assessed", Boolean, nullable=False, default=True),
    Column("created_at", UTCDateTime),
    UniqueConstraint("booking_id", "side", name="uq_damage_verdicts_side"),
)

deposit_refunds = Table(
    "deposit_refunds",
    metadata,
    Column("id", String(40), primary_key=True),
    Column("booking_id", String(40), nullable=False, unique=True),
    Column("original_hold_id", String(64), nullable=False),
    Column("refund_type", String(16), nullable=False),
    Column("refund_amount", Numeric(12, 2), nullable=False),
    Column("deposit_amount", Numeric(12, 2), nullable=False),
    Column("damage_amount", Numeric(12, 2)),
    Column("operation", String(32), nullable=False),
    Column("reason", Text, nullable=False, default=""),
    Column("status", String(16), nullable=False),
    Column("attempts", Integer, nullable=False, default=0),
    Column("failure_message", Text),
    Column("created_at", UTCDateTime),
    Column("completed_at", UTCDateTime),
)
