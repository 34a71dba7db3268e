"""Review model: one rating per (user, technician) pair."""

from __future__ import annotations

from sqlalchemy import String, Integer, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from techmarket.models.base import Base, ULIDMixin


class Review(Base, ULIDMixin):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "technician_id", name="uq_reviews_user_technician"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )

    technician_id: Mapped[str] = mapped_column(String(26), ForeignKey("technicians.id"), index=True)
    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), index=True)
    rating: Mapped[int] = mapped_column(Integer)
    comment: Mapped[str] = mapped_column(String(500), default="")

    user = relationship("User", lazy="selectin")
