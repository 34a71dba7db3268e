"""Technician profile: the service-provider record linked 1:1 to a User."""

from __future__ import annotations

from sqlalchemy import String, Boolean, Float, Integer, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from techmarket.models.base import Base, ULIDMixin, UpdatedAtMixin

SERVICE_CATEGORIES = (
    "Home Appliance Repair",
    "Plumbing",
    "Electrical Services",
    "Computer Hardware Repair",
    "Software Troubleshooting",
    "Network Setup",
    "Car Repair",
    "Motorcycle Repair",
    "Vehicle AC Repair",
    "Other",
)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Values given to profiles created at registration or by role promotion.
PLACEHOLDER_SERVICES = ["Other"]
PLACEHOLDER_LOCATION = "To be specified"
PLACEHOLDER_CONTACT = "0000000000"


class Technician(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "technicians"

    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), unique=True, index=True)
    services_offered: Mapped[list] = mapped_column(JSON, default=lambda: list(PLACEHOLDER_SERVICES))
    specializations: Mapped[list] = mapped_column(JSON, default=list)
    contact_number: Mapped[str] = mapped_column(String(20), default=PLACEHOLDER_CONTACT)
    location: Mapped[str] = mapped_column(String(200), default=PLACEHOLDER_LOCATION)
    service_areas: Mapped[list] = mapped_column(JSON, default=list)
    description: Mapped[str] = mapped_column(String(500), default="")

    # Cache of the Review aggregate, maintained by services.ratings.
    average_rating: Mapped[float] = mapped_column(Float, default=0.0)
    review_count: Mapped[int] = mapped_column(Integer, default=0)

    availability: Mapped[list] = mapped_column(JSON, default=lambda: list(WEEKDAYS[:5]))
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    is_verified_by_admin: Mapped[bool] = mapped_column(Boolean, default=False)

    user = relationship("User", lazy="selectin")
