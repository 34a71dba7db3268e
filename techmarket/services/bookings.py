"""Booking rules: weekday availability, slot conflicts, status transitions."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from techmarket.db import crud
from techmarket.errors import Conflict, Forbidden, InvalidRequest, NotFound
from techmarket.models import Booking, Role, BOOKING_STATUSES, WEEKDAYS
from techmarket.services.accounts import require_account
from techmarket.services.auth import AuthContext

logger = logging.getLogger(__name__)

SLOT_TAKEN = "This time slot is already booked for this technician."


def is_slot_violation(exc: IntegrityError) -> bool:
    """True when the active-slot index rejected the row (SQLite or PostgreSQL wording)."""
    message = str(exc.orig)
    return (
        "uq_bookings_active_slot" in message
        or "bookings.technician_id, bookings.booking_date, bookings.booking_time" in message
    )


def normalize_booking_date(value) -> date:
    """Reduce a date, datetime or ISO string to a calendar date.

    Aware datetimes are converted to UTC first, so "2024-06-03T00:30:00+02:00"
    becomes 2024-06-02.
    """
    if isinstance(value, str):
        raw = value.strip()
        try:
            value = date.fromisoformat(raw)
        except ValueError:
            value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    raise ValueError(f"Invalid booking date: {value!r}")


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


async def create_booking(
    db: AsyncSession,
    user_id: str,
    technician_id: str,
    service: str,
    booking_date: date,
    booking_time: str,
    notes: str = "",
    total_price: float | None = None,
) -> Booking:
    """Create a pending booking if the technician is bookable and the slot is free.

    The time is matched as an exact string, so "2:00 PM" and "2:05 PM" never
    conflict. The partial unique index on active slots settles races between
    the conflict check and the insert.
    """
    await require_account(db, user_id)

    tech = await crud.get_technician(db, technician_id)
    if not tech or not tech.is_verified_by_admin:
        raise NotFound("Technician not found or not verified")

    day = weekday_name(booking_date)
    if day not in (tech.availability or []):
        raise InvalidRequest(f"{tech.user.name} is not available on {day}")

    if await crud.find_active_booking(db, technician_id, booking_date, booking_time):
        raise Conflict(SLOT_TAKEN)

    booking = Booking(
        user_id=user_id,
        technician_id=technician_id,
        service=service,
        booking_date=booking_date,
        booking_time=booking_time,
        notes=notes or "",
        total_price=total_price or 0.0,
        status="pending",
    )
    db.add(booking)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if not is_slot_violation(e):
            logger.exception("Booking insert failed for technician %s by user %s", technician_id, user_id)
            raise
        logger.warning(
            "Slot %s %s for technician %s taken concurrently", booking_date, booking_time, technician_id,
        )
        raise Conflict(SLOT_TAKEN)
    await db.refresh(booking)
    logger.info("Booking %s created for technician %s by user %s", booking.id, technician_id, user_id)
    return booking


async def list_my_bookings(db: AsyncSession, auth: AuthContext) -> list[Booking]:
    """Bookings made by a user, or assigned to the caller's technician profile."""
    if auth.role == Role.USER:
        return await crud.list_bookings_for_user(db, auth.user_id)
    if auth.role == Role.TECHNICIAN:
        profile = await crud.get_technician_for_user(db, auth.user_id)
        if not profile:
            raise NotFound("Technician profile not found.")
        return await crud.list_bookings_for_technician(db, profile.id)
    raise Forbidden("Access denied: Invalid user role.")


async def update_booking_status(
    db: AsyncSession, auth: AuthContext, booking_id: str, status: str,
) -> Booking:
    """Move a booking to a new status; only its technician or an admin may do so."""
    if status not in BOOKING_STATUSES:
        raise InvalidRequest("Invalid booking status provided.")

    booking = await crud.get_booking(db, booking_id)
    if not booking:
        raise NotFound("Booking not found")

    if auth.role != Role.ADMIN:
        profile = await crud.get_technician_for_user(db, auth.user_id)
        if not profile or profile.id != booking.technician_id:
            raise Forbidden("Access denied: You are not authorized to update this booking status.")

    previous = booking.status
    booking.status = status
    try:
        await db.commit()
    except IntegrityError as e:
        # Re-activating a cancelled/completed booking whose slot was re-booked.
        await db.rollback()
        if not is_slot_violation(e):
            raise
        raise Conflict(SLOT_TAKEN)
    await db.refresh(booking)
    logger.info("Booking %s status %s -> %s by %s", booking.id, previous, status, auth.user_id)
    return booking
