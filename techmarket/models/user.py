"""User account model and the role vocabulary."""

from __future__ import annotations

import enum
import re

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, validates

from techmarket.errors import ValidationError
from techmarket.models.base import Base, ULIDMixin

EMAIL_PATTERN = re.compile(r".+@.+\..+")


class Role(str, enum.Enum):
    USER = "user"
    TECHNICIAN = "technician"
    ADMIN = "admin"


ROLES = tuple(r.value for r in Role)


class User(Base, ULIDMixin):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(200))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(20), default=Role.USER.value)  # user | technician | admin
    location: Mapped[str] = mapped_column(String(200), default="Unspecified")

    @validates("email")
    def _normalize_email(self, key, value: str) -> str:
        value = (value or "").strip().lower()
        if not EMAIL_PATTERN.fullmatch(value):
            raise ValidationError("Please fill a valid email address")
        return value

    @validates("role")
    def _check_role(self, key, value) -> str:
        value = getattr(value, "value", value)
        if value not in ROLES:
            raise ValidationError(f"Invalid role: {value}")
        return value
