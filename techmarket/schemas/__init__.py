"""Pydantic request/response schemas."""

from techmarket.schemas.user import UserBrief, UserRead, ReviewerRead, RoleUpdate
from techmarket.schemas.technician import (
    TechnicianBrief, TechnicianRead, TechnicianAdminRead, TechnicianProfileUpdate,
)
from techmarket.schemas.booking import BookingCreate, BookingRead, BookingDetail, BookingStatusUpdate
from techmarket.schemas.review import ReviewCreate, ReviewRead, ReviewDetail

__all__ = [
    "UserBrief", "UserRead", "ReviewerRead", "RoleUpdate",
    "TechnicianBrief", "TechnicianRead", "TechnicianAdminRead", "TechnicianProfileUpdate",
    "BookingCreate", "BookingRead", "BookingDetail", "BookingStatusUpdate",
    "ReviewCreate", "ReviewRead", "ReviewDetail",
]
