"""SQLAlchemy ORM models."""

from techmarket.models.base import Base
from techmarket.models.user import User, Role, ROLES
from techmarket.models.technician import Technician, SERVICE_CATEGORIES, WEEKDAYS
from techmarket.models.booking import Booking, BOOKING_STATUSES, ACTIVE_STATUSES
from techmarket.models.review import Review

__all__ = [
    "Base",
    "User", "Role", "ROLES",
    "Technician", "SERVICE_CATEGORIES", "WEEKDAYS",
    "Booking", "BOOKING_STATUSES", "ACTIVE_STATUSES",
    "Review",
]
