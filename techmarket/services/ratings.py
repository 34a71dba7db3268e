"""Rating aggregation.

Technician.average_rating and review_count are a cache of the Review table.
They are recomputed in full (count and mean of every review of the
technician) after each review is written, and for every technician that
loses reviews in a cascade delete.
"""

from __future__ import annotations

import logging
import math

from sqlalchemy.ext.asyncio import AsyncSession

from techmarket.db import crud
from techmarket.models import Technician

logger = logging.getLogger(__name__)


async def recompute_technician_rating(db: AsyncSession, technician_id: str) -> tuple[float, int] | None:
    """Write the current aggregate onto the profile without committing.

    Returns (average, count), or None when the technician no longer exists.
    """
    tech = await db.get(Technician, technician_id)
    if tech is None:
        return None
    count, average = await crud.get_rating_stats(db, technician_id)
    tech.average_rating = average
    tech.review_count = count
    return average, count


async def refresh_technician_rating(db: AsyncSession, technician_id: str) -> bool:
    """Best-effort recompute + commit; failures are logged, never raised."""
    try:
        await recompute_technician_rating(db, technician_id)
        await db.commit()
        return True
    except Exception:
        logger.exception("Failed to update rating for technician %s", technician_id)
        await db.rollback()
        return False


async def rating_is_consistent(db: AsyncSession, technician: Technician) -> bool:
    """True when the cached fields match the Review table."""
    count, average = await crud.get_rating_stats(db, technician.id)
    return technician.review_count == count and math.isclose(
        technician.average_rating or 0.0, average, abs_tol=1e-9,
    )


async def find_inconsistent_ratings(db: AsyncSession) -> list[Technician]:
    techs = await crud.list_technicians(db)
    return [t for t in techs if not await rating_is_consistent(db, t)]
