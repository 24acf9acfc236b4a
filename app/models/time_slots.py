"""Time slots table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Table,
    UniqueConstraint,
    Uuid,
    false,
    func,
)

from app.models.base import metadata

# Bookable capacity published by veterinarians
time_slots = Table(
    "time_slots",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "veterinarian_id",
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    # Plain strings: YYYY-MM-DD and HH:MM
    Column("date", String(10), nullable=False),
    Column("start_time", String(5), nullable=False),
    Column("end_time", String(5), nullable=False),
    Column("is_booked", Boolean, nullable=False, server_default=false()),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint("start_time < end_time", name="time_slots_time_range_check"),
    # Reserve/release lookup key; one row per triple
    UniqueConstraint(
        "veterinarian_id",
        "date",
        "start_time",
        name="uq_time_slots_vet_date_start",
    ),
    Index("idx_time_slots_date", "date"),
)
