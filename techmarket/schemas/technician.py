"""Technician profile schemas, including the technician's self-service edit."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from techmarket.models.technician import SERVICE_CATEGORIES, WEEKDAYS
from techmarket.schemas.user import UserBrief, UserRead

CONTACT_PATTERN = re.compile(r"^\+?\d{10,15}$")


def split_list(value) -> list[str]:
    """Accept a list or a comma-separated string; trim, drop blanks, de-duplicate in order."""
    if isinstance(value, str):
        value = value.split(",")
    items = []
    for item in value:
        item = str(item).strip()
        if item and item not in items:
            items.append(item)
    return items


class TechnicianBrief(BaseModel):
    id: str
    user: UserBrief
    contact_number: str
    location: str

    model_config = {"from_attributes": True}


class TechnicianRead(BaseModel):
    id: str
    user: UserBrief
    services_offered: list[str]
    specializations: list[str] = []
    contact_number: str
    location: str
    service_areas: list[str] = []
    description: str = ""
    average_rating: float = 0.0
    review_count: int = 0
    availability: list[str] = []
    is_available: bool = True
    is_verified_by_admin: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TechnicianAdminRead(TechnicianRead):
    user: UserRead


class TechnicianProfileUpdate(BaseModel):
    """Fields a technician may set on their own profile; omitted fields stay unchanged."""

    services_offered: list[str] | str | None = None
    specializations: list[str] | str | None = None
    contact_number: str | None = None
    location: str | None = Field(default=None, min_length=1, max_length=200)
    service_areas: list[str] | str | None = None
    description: str | None = Field(default=None, max_length=500)
    availability: list[str] | None = None
    is_available: bool | None = None

    model_config = {"str_strip_whitespace": True}

    @field_validator("specializations", "service_areas")
    @classmethod
    def _split(cls, v):
        return None if v is None else split_list(v)

    @field_validator("services_offered")
    @classmethod
    def _check_services(cls, v):
        if v is None:
            return None
        services = split_list(v)
        if not services:
            raise ValueError("At least one service is required")
        unknown = [s for s in services if s not in SERVICE_CATEGORIES]
        if unknown:
            raise ValueError(f"Unknown services: {', '.join(unknown)}")
        return services

    @field_validator("contact_number")
    @classmethod
    def _check_contact(cls, v):
        if v is not None and not CONTACT_PATTERN.match(v):
            raise ValueError("Please fill a valid contact number")
        return v

    @field_validator("availability")
    @classmethod
    def _check_days(cls, v):
        if v is None:
            return None
        days = split_list(v)
        unknown = [d for d in days if d not in WEEKDAYS]
        if unknown:
            raise ValueError(f"Unknown weekdays: {', '.join(unknown)}")
        return days
