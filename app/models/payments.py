"""Payment records table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
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
    func,
)

from app.models.base import metadata

# Append-only audit trail, one row per charge attempt
payments = Table(
    "payments",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "appointment_id",
        Uuid,
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("amount", Numeric(10, 2, asdecimal=False), nullable=False),
    Column("payment_method", String(30), nullable=False),
    Column("provider_payment_id", Text, nullable=True),
    Column("status", String(20), nullable=False),
    Column("failure_reason", Text, nullable=True),
    Column(
        "transaction_date",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
    CheckConstraint(
        "status IN ('pending', 'completed', 'failed')",
        name="payments_status_check",
    ),
    Index("idx_payments_appointment_id", "appointment_id"),
    Index("idx_payments_user_id", "user_id"),
)
