from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
    text,
)

metadata = MetaData()

vehicles = Table(
    "vehicles",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(150), nullable=False),
    Column("daily_rate", Numeric(12, 2), nullable=False),
    Column("weekly_rate", Numeric(12, 2)),
    Column("monthly_rate", Numeric(12, 2)),
    Column("available", Boolean, nullable=False, default=True),
    Column("locations", JSON, nullable=False, default=list),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
)

bookings = Table(
    "bookings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("booking_reference", String(50), nullable=False, unique=True),
    Column("vehicle_id", Integer, ForeignKey("vehicles.id"), nullable=False),
    Column("requester_id", String(64), nullable=False),
    Column("pickup_date", DateTime, nullable=False),
    Column("return_date", DateTime, nullable=False),
    Column("pickup_location", String(255)),
    Column("dropoff_location", String(255)),
    Column("status", String(32), nullable=False),
    Column("payment_status", String(32), nullable=False),
    Column("total_price", Numeric(12, 2), nullable=False),
    Column("admin_notes", Text),
    Column("lock_version", Integer, nullable=False, default=0),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
    Index("ix_bookings_vehicle_status", "vehicle_id", "status"),
    Index("ix_bookings_status_return", "status", "return_date"),
)

rental_extensions = Table(
    "rental_extensions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("booking_id", Integer, ForeignKey("bookings.id"), nullable=False),
    Column("requester_id", String(64), nullable=False),
    Column("original_return_date", DateTime, nullable=False),
    Column("new_return_date", DateTime, nullable=False),
    Column("requested_extension_days", Integer, nullable=False),
    Column("extension_fee", Numeric(12, 2), nullable=False),
    Column("status", String(16), nullable=False),
    Column("admin_notes", Text),
    Column("reviewed_by", String(64)),
    Column("reviewed_at", DateTime),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
    # at most one pending extension per booking
    Index(
        "uq_rental_extensions_pending",
        "booking_id",
        unique=True,
        sqlite_where=text("status = 'pending'"),
        postgresql_where=text("status = 'pending'"),
    ),
)

late_fees = Table(
    "late_fees",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("booking_id", Integer, ForeignKey("bookings.id"), nullable=False),
    Column("original_return_date", DateTime, nullable=False),
    Column("actual_return_date", DateTime),
    Column("hours_overdue", Integer, nullable=False),
    Column("hourly_rate", Numeric(12, 2), nullable=False),
    Column("total_late_fee", Numeric(12, 2), nullable=False),
    Column("payment_status", String(16), nullable=False),
    Column("paid_amount", Numeric(12, 2), nullable=False, default=0),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
    UniqueConstraint("booking_id", name="uq_late_fees_booking"),
)

payments = Table(
    "payments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("booking_id", Integer, ForeignKey("bookings.id"), nullable=False),
    Column("payer_id", String(64)),
    Column("payment_type", String(32), nullable=False),
    Column("payment_method", String(32)),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("status", String(16), nullable=False),
    Column("is_deposit", Boolean, nullable=False, default=False),
    Column("deposit_refunded", Boolean, nullable=False, default=False),
    Column("deposit_refund_amount", Numeric(12, 2)),
    Column("deposit_refunded_at", DateTime),
    Column("reference_number", String(100)),
    Column("transaction_id", String(100)),
    Column("admin_notes", Text),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
    Index("ix_payments_booking", "booking_id"),
)

peak_season_pricing = Table(
    "peak_season_pricing",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(150), nullable=False),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
    Column("pricing_type", String(16), nullable=False),
    Column("price_multiplier", Numeric(6, 3), nullable=False, default=1),
    Column("fixed_increase", Numeric(12, 2), nullable=False, default=0),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("notes", Text),
)
