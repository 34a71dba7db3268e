from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from techmarket.db import crud
from techmarket.db.engine import get_db
from techmarket.dependencies import require_user
from techmarket.schemas import ReviewCreate, ReviewRead, ReviewDetail
from techmarket.services.auth import AuthContext
from techmarket.services.reviews import create_review

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.post("", response_model=ReviewRead, status_code=201)
async def submit_review(
    body: ReviewCreate,
    auth: AuthContext = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    return await create_review(
        db, auth.user_id, body.technician_id, body.rating, body.comment,
    )


@router.get("/{technician_id}", response_model=list[ReviewDetail])
async def list_reviews(technician_id: str, db: AsyncSession = Depends(get_db)):
    """Reviews of a technician, newest first."""
    return await crud.list_reviews_for_technician(db, technician_id)
