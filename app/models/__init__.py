"""Database models."""

from app.models.appointments import appointments
from app.models.base import metadata
from app.models.notifications import notifications
from app.models.payments import payments
from app.models.pets import pets
from app.models.time_slots import time_slots
from app.models.users import users

__all__ = [
    "appointments",
    "metadata",
    "notifications",
    "payments",
    "pets",
    "time_slots",
    "users",
]
