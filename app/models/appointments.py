"""Appointments table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
    false,
    func,
)

from app.models.base import metadata

# Appointments table
appointments = Table(
    "appointments",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # Ownership / references
    Column("pet_owner_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("veterinarian_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("pet_id", Uuid, ForeignKey("pets.id", ondelete="RESTRICT"), nullable=False),
    # Snapshot of the reserved slot
    Column("date", String(10), nullable=False),
    Column("start_time", String(5), nullable=False),
    Column("end_time", String(5), nullable=False),
    # Appointment details
    Column("appointment_type", String(30), nullable=False),
    Column("severity", String(20), nullable=False),
    Column("notes", Text, nullable=True),
    # Status management
    Column("status", String(20), nullable=False, server_default="pending"),
    # Deposit
    Column("deposit_amount", Numeric(10, 2, asdecimal=False), nullable=False),
    Column("deposit_paid", Boolean, nullable=False, server_default=false()),
    Column("payment_id", Text, nullable=True),
    # Treatment
    Column("veterinarian_notes", Text, nullable=True),
    # Audit fields
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("confirmed_at", DateTime(timezone=True), nullable=True),
    Column("completed_at", DateTime(timezone=True), nullable=True),
    Column("cancelled_at", DateTime(timezone=True), nullable=True),
    Column("cancelled_by", Uuid, nullable=True),
    # Constraints
    CheckConstraint(
        "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
        name="appointments_status_check",
    ),
    CheckConstraint(
        "appointment_type IN ('regular_checkup', 'vaccination', 'emergency', "
        "'surgery', 'dental', 'grooming')",
        name="appointments_type_check",
    ),
    CheckConstraint(
        "severity IN ('low', 'medium', 'high', 'emergency')",
        name="appointments_severity_check",
    ),
    CheckConstraint("deposit_amount >= 0", name="appointments_deposit_check"),
    Index("idx_appointments_pet_owner_id", "pet_owner_id"),
    Index("idx_appointments_veterinarian_id", "veterinarian_id"),
    Index("idx_appointments_status", "status"),
    Index("idx_appointments_slot", "veterinarian_id", "date", "start_time"),
)
