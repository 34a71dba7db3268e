"""CRUD operations for users, technician profiles, bookings and reviews."""

from __future__ import annotations

from datetime import date

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from techmarket.models import User, Technician, Booking, Review, ACTIVE_STATUSES


# ── User ─────────────────────────────────────────────────

async def get_user(db: AsyncSession, user_id: str) -> User | None:
    return await db.get(User, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(
        select(User).where(User.email == email.strip().lower())
    )
    return result.scalars().first()


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(
        select(User).order_by(User.created_at.desc(), User.id.desc())
    )
    return list(result.scalars().all())


# ── Technician ───────────────────────────────────────────

async def get_technician(db: AsyncSession, technician_id: str) -> Technician | None:
    """Load a profile with its user, refreshing any copy already in the session."""
    result = await db.execute(
        select(Technician)
        .where(Technician.id == technician_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_technician_for_user(db: AsyncSession, user_id: str) -> Technician | None:
    result = await db.execute(
        select(Technician)
        .where(Technician.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def list_technicians_for_user(db: AsyncSession, user_id: str) -> list[Technician]:
    result = await db.execute(select(Technician).where(Technician.user_id == user_id))
    return list(result.scalars().all())


async def list_technicians(db: AsyncSession, verified: bool | None = None) -> list[Technician]:
    """All profiles, newest first; `verified` filters on the admin-verification flag."""
    stmt = select(Technician).order_by(Technician.created_at.desc(), Technician.id.desc())
    if verified is not None:
        stmt = stmt.where(Technician.is_verified_by_admin == verified)
    result = await db.execute(stmt)
    return list(result.scalars().all())


def _any_contains(values: list[str], needle: str) -> bool:
    return any(needle in v.lower() for v in values or [])


async def search_technicians(
    db: AsyncSession,
    service: str | None = None,
    location: str | None = None,
    service_area: str | None = None,
) -> list[Technician]:
    """Verified technicians matching every given filter (case-insensitive substring).

    List-valued columns are JSON, so their filters run in Python after the
    location filter narrows the query.
    """
    stmt = select(Technician).where(Technician.is_verified_by_admin == True)
    if location:
        stmt = stmt.where(
            func.lower(Technician.location).contains(location.strip().lower(), autoescape=True)
        )
    result = await db.execute(stmt.order_by(Technician.created_at.desc()))
    techs = list(result.scalars().all())

    if service:
        needle = service.strip().lower()
        techs = [t for t in techs if _any_contains(t.services_offered, needle)]
    if service_area:
        needle = service_area.strip().lower()
        techs = [t for t in techs if _any_contains(t.service_areas, needle)]
    return techs


def new_placeholder_technician(user: User) -> Technician:
    """Unverified profile with placeholder values; caller adds and commits."""
    return Technician(user=user)


async def update_technician(db: AsyncSession, tech: Technician, **kwargs) -> Technician:
    for k, v in kwargs.items():
        if v is not None:
            setattr(tech, k, v)
    await db.commit()
    return await get_technician(db, tech.id)


# ── Booking ──────────────────────────────────────────────

async def get_booking(db: AsyncSession, booking_id: str) -> Booking | None:
    return await db.get(Booking, booking_id)


async def find_active_booking(
    db: AsyncSession, technician_id: str, booking_date: date, booking_time: str,
) -> Booking | None:
    """Pending or confirmed booking occupying exactly this slot, if any."""
    result = await db.execute(
        select(Booking).where(
            Booking.technician_id == technician_id,
            Booking.booking_date == booking_date,
            Booking.booking_time == booking_time,
            Booking.status.in_(ACTIVE_STATUSES),
        )
    )
    return result.scalars().first()


async def list_bookings_for_user(db: AsyncSession, user_id: str) -> list[Booking]:
    result = await db.execute(
        select(Booking)
        .where(Booking.user_id == user_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    return list(result.scalars().all())


async def list_bookings_for_technician(db: AsyncSession, technician_id: str) -> list[Booking]:
    result = await db.execute(
        select(Booking)
        .where(Booking.technician_id == technician_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    return list(result.scalars().all())


async def has_completed_booking(db: AsyncSession, user_id: str, technician_id: str) -> bool:
    result = await db.execute(
        select(Booking.id).where(
            Booking.user_id == user_id,
            Booking.technician_id == technician_id,
            Booking.status == "completed",
        ).limit(1)
    )
    return result.first() is not None


# ── Review ───────────────────────────────────────────────

async def get_review_by_pair(db: AsyncSession, user_id: str, technician_id: str) -> Review | None:
    result = await db.execute(
        select(Review).where(
            Review.user_id == user_id,
            Review.technician_id == technician_id,
        )
    )
    return result.scalars().first()


async def list_reviews_for_technician(db: AsyncSession, technician_id: str) -> list[Review]:
    result = await db.execute(
        select(Review)
        .where(Review.technician_id == technician_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return list(result.scalars().all())


async def get_rating_stats(db: AsyncSession, technician_id: str) -> tuple[int, float]:
    """(review count, mean rating) over all reviews of a technician; mean is 0 with no reviews."""
    result = await db.execute(
        select(func.count(Review.id), func.avg(Review.rating))
        .where(Review.technician_id == technician_id)
    )
    count, average = result.one()
    return int(count or 0), float(average) if average is not None else 0.0
