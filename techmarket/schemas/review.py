from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field

from techmarket.schemas.user import ReviewerRead


class ReviewCreate(BaseModel):
    technician_id: str
    rating: int = Field(ge=1, le=5)
    comment: str = Field(default="", max_length=500)

    model_config = {"str_strip_whitespace": True}


class ReviewRead(BaseModel):
    id: str
    technician_id: str
    user_id: str
    rating: int
    comment: str = ""
    created_at: datetime

    model_config = {"from_attributes": True}


class ReviewDetail(ReviewRead):
    user: ReviewerRead | None = None
