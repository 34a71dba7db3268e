from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class UserBrief(BaseModel):
    id: str
    name: str
    email: str

    model_config = {"from_attributes": True}


class UserRead(BaseModel):
    id: str
    name: str
    email: str
    role: str
    location: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ReviewerRead(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class RoleUpdate(BaseModel):
    role: str
