from __future__ import annotations
from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator

from techmarket.schemas.technician import TechnicianBrief
from techmarket.schemas.user import UserBrief
from techmarket.services.bookings import normalize_booking_date


class BookingCreate(BaseModel):
    technician_id: str
    service: str = Field(min_length=1, max_length=200)
    booking_date: date
    booking_time: str = Field(min_length=1, max_length=50)
    notes: str = Field(default="", max_length=300)
    total_price: float | None = Field(default=None, ge=0)

    model_config = {"str_strip_whitespace": True}

    @field_validator("booking_date", mode="before")
    @classmethod
    def _normalize_date(cls, v):
        return normalize_booking_date(v)


class BookingRead(BaseModel):
    id: str
    user_id: str
    technician_id: str
    service: str
    booking_date: date
    booking_time: str
    status: str
    total_price: float = 0.0
    notes: str = ""
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingDetail(BookingRead):
    user: UserBrief | None = None
    technician: TechnicianBrief | None = None


class BookingStatusUpdate(BaseModel):
    status: str  # pending | confirmed | completed | cancelled
