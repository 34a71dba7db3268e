"""Booking model: a user's reservation of a technician slot."""

from __future__ import annotations

from datetime import date

from sqlalchemy import String, Date, Float, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from techmarket.errors import ValidationError
from techmarket.models.base import Base, ULIDMixin, UpdatedAtMixin

BOOKING_STATUSES = ("pending", "confirmed", "completed", "cancelled")
ACTIVE_STATUSES = ("pending", "confirmed")

_ACTIVE_SLOT_CLAUSE = text("status IN ('pending', 'confirmed')")


class Booking(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "bookings"
    __table_args__ = (
        # At most one active booking per (technician, date, time).
        Index(
            "uq_bookings_active_slot",
            "technician_id", "booking_date", "booking_time",
            unique=True,
            sqlite_where=_ACTIVE_SLOT_CLAUSE,
            postgresql_where=_ACTIVE_SLOT_CLAUSE,
        ),
    )

    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), index=True)
    technician_id: Mapped[str] = mapped_column(String(26), ForeignKey("technicians.id"), index=True)
    service: Mapped[str] = mapped_column(String(200))
    booking_date: Mapped[date] = mapped_column(Date)
    booking_time: Mapped[str] = mapped_column(String(50))  # free-form, e.g. "10:00 AM"
    status: Mapped[str] = mapped_column(String(20), default="pending")
    total_price: Mapped[float] = mapped_column(Float, default=0.0)
    notes: Mapped[str] = mapped_column(String(300), default="")

    user = relationship("User", lazy="selectin")
    technician = relationship("Technician", lazy="selectin")

    @validates("status")
    def _check_status(self, key, value: str) -> str:
        if value not in BOOKING_STATUSES:
            raise ValidationError(f"Invalid booking status: {value}")
        return value
