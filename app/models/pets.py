"""Pets table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Table,
    Text,
    Uuid,
    func,
)

from app.models.base import metadata

pets = Table(
    "pets",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("owner_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("name", Text, nullable=False),
    # dog, cat, bird, etc.
    Column("species", Text, nullable=False),
    Column("breed", Text, nullable=False),
    Column("age", Integer, nullable=False),
    Column("weight", Float, nullable=True),
    Column("medical_history", Text, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Index("idx_pets_owner_id", "owner_id"),
)
