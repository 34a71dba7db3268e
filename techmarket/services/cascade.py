"""Cascade deletion of technician profiles and user accounts.

Each cascade runs as a single unit of work on the request session: every
delete is issued inside the session's transaction and committed once at the
end. Any failure rolls the whole cascade back, so no orphaned bookings or
reviews are left behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from techmarket.db import crud
from techmarket.errors import Forbidden, NotFound
from techmarket.models import Booking, Review, Role, Technician, User
from techmarket.services.auth import AuthContext
from techmarket.services.ratings import recompute_technician_rating

logger = logging.getLogger(__name__)


@dataclass
class CascadeResult:
    technicians_deleted: int = 0
    bookings_deleted: int = 0
    reviews_deleted: int = 0
    user_deleted: bool = False
    user_demoted: bool = False
    ratings_recomputed: list[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "technicians_deleted": self.technicians_deleted,
            "bookings_deleted": self.bookings_deleted,
            "reviews_deleted": self.reviews_deleted,
            "user_deleted": self.user_deleted,
            "user_demoted": self.user_demoted,
            "ratings_recomputed": list(self.ratings_recomputed),
        }


async def _purge_technician(db: AsyncSession, technician_id: str, result: CascadeResult) -> None:
    reviews = await db.execute(delete(Review).where(Review.technician_id == technician_id))
    result.reviews_deleted += reviews.rowcount or 0
    bookings = await db.execute(delete(Booking).where(Booking.technician_id == technician_id))
    result.bookings_deleted += bookings.rowcount or 0
    await db.execute(delete(Technician).where(Technician.id == technician_id))
    result.technicians_deleted += 1


async def _purge_user(db: AsyncSession, user_id: str, result: CascadeResult) -> None:
    """Remove what the user authored as a customer, then the account itself."""
    rows = await db.execute(
        select(Review.technician_id).where(Review.user_id == user_id).distinct()
    )
    reviewed = [r[0] for r in rows.all()]

    reviews = await db.execute(delete(Review).where(Review.user_id == user_id))
    result.reviews_deleted += reviews.rowcount or 0
    bookings = await db.execute(delete(Booking).where(Booking.user_id == user_id))
    result.bookings_deleted += bookings.rowcount or 0
    await db.execute(delete(User).where(User.id == user_id))
    result.user_deleted = True

    for technician_id in reviewed:
        if await recompute_technician_rating(db, technician_id) is not None:
            result.ratings_recomputed.append(technician_id)


async def delete_technician(db: AsyncSession, technician_id: str) -> CascadeResult:
    """Delete a profile with its reviews and bookings, then settle the owning user.

    The user is deleted when it has no other profile and is not an admin;
    otherwise a `technician` role is demoted to `user`. Admins are never touched.
    """
    tech = await crud.get_technician(db, technician_id)
    if not tech:
        raise NotFound("Technician profile not found")
    user_id = tech.user_id
    result = CascadeResult()

    try:
        await _purge_technician(db, technician_id, result)
        user = await crud.get_user(db, user_id)
        if user is not None:
            remaining = await crud.list_technicians_for_user(db, user_id)
            if not remaining and user.role != Role.ADMIN:
                await _purge_user(db, user_id, result)
            elif user.role == Role.TECHNICIAN:
                user.role = Role.USER
                result.user_demoted = True
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Technician cascade rolled back: technician=%s user=%s", technician_id, user_id)
        raise

    logger.info("Deleted technician %s: %s", technician_id, result.as_dict())
    return result


async def delete_user(db: AsyncSession, user_id: str, actor: AuthContext) -> CascadeResult:
    """Delete an account with every profile it owns and everything referencing them."""
    if actor.user_id == user_id:
        raise Forbidden("Cannot delete your own admin account")

    user = await crud.get_user(db, user_id)
    if not user:
        raise NotFound("User not found")
    if user.role == Role.ADMIN:
        raise Forbidden("Cannot delete an admin account; change its role first")

    result = CascadeResult()
    try:
        for tech in await crud.list_technicians_for_user(db, user_id):
            await _purge_technician(db, tech.id, result)
        await _purge_user(db, user_id, result)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("User cascade rolled back: user=%s", user_id)
        raise

    logger.info("Deleted user %s by %s: %s", user_id, actor.user_id, result.as_dict())
    return result
