from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from techmarket.db.engine import get_db
from techmarket.dependencies import require_role, require_user
from techmarket.models import Role
from techmarket.schemas import BookingCreate, BookingRead, BookingDetail, BookingStatusUpdate
from techmarket.services import bookings as booking_service
from techmarket.services.auth import AuthContext

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post("", response_model=BookingRead, status_code=201)
async def create_booking(
    body: BookingCreate,
    auth: AuthContext = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.create_booking(
        db,
        user_id=auth.user_id,
        technician_id=body.technician_id,
        service=body.service,
        booking_date=body.booking_date,
        booking_time=body.booking_time,
        notes=body.notes,
        total_price=body.total_price,
    )


@router.get("/me", response_model=list[BookingDetail])
async def my_bookings(
    auth: AuthContext = Depends(require_role(Role.USER, Role.TECHNICIAN)),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.list_my_bookings(db, auth)


@router.put("/{booking_id}/status", response_model=BookingRead)
async def update_booking_status(
    booking_id: str,
    body: BookingStatusUpdate,
    auth: AuthContext = Depends(require_role(Role.TECHNICIAN, Role.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.update_booking_status(db, auth, booking_id, body.status)
