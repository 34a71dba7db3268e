"""Review submission with server-side eligibility."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from techmarket.db import crud
from techmarket.errors import Conflict, InvalidRequest, NotFound
from techmarket.models import Review
from techmarket.services.accounts import require_account
from techmarket.services.ratings import refresh_technician_rating

logger = logging.getLogger(__name__)

ALREADY_REVIEWED = "You have already reviewed this technician."


def is_duplicate_review(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return "uq_reviews_user_technician" in message or "reviews.user_id, reviews.technician_id" in message


async def create_review(
    db: AsyncSession, user_id: str, technician_id: str, rating: int, comment: str = "",
) -> Review:
    """Store one review per (user, technician) and refresh the technician's rating.

    The reviewer must have a completed booking with the technician.
    """
    await require_account(db, user_id)

    tech = await crud.get_technician(db, technician_id)
    if not tech:
        raise NotFound("Technician not found")

    if await crud.get_review_by_pair(db, user_id, technician_id):
        raise Conflict(ALREADY_REVIEWED)

    if not await crud.has_completed_booking(db, user_id, technician_id):
        raise InvalidRequest("You can only review a technician after a completed booking.")

    review = Review(technician_id=technician_id, user_id=user_id, rating=rating, comment=comment or "")
    db.add(review)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if not is_duplicate_review(e):
            raise
        raise Conflict(ALREADY_REVIEWED)
    await db.refresh(review)

    if not await refresh_technician_rating(db, technician_id):
        # The failed aggregation rolled the session back and expired the review.
        await db.refresh(review)
    return review
