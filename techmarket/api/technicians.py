"""Public technician directory."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from techmarket.db import crud
from techmarket.db.engine import get_db
from techmarket.errors import NotFound
from techmarket.schemas import TechnicianRead

router = APIRouter(prefix="/api/technicians", tags=["technicians"])


@router.get("", response_model=list[TechnicianRead])
async def list_technicians(db: AsyncSession = Depends(get_db)):
    return await crud.list_technicians(db, verified=True)


# Declared before /{technician_id} so "search" is not taken for an id.
@router.get("/search", response_model=list[TechnicianRead])
async def search_technicians(
    service: str | None = None,
    location: str | None = None,
    service_area: str | None = Query(default=None, alias="serviceArea"),
    db: AsyncSession = Depends(get_db),
):
    """Verified technicians matching all given filters; an empty list when none match."""
    return await crud.search_technicians(
        db, service=service, location=location, service_area=service_area,
    )


@router.get("/{technician_id}", response_model=TechnicianRead)
async def get_technician(technician_id: str, db: AsyncSession = Depends(get_db)):
    tech = await crud.get_technician(db, technician_id)
    if not tech:
        raise NotFound("Technician not found")
    return tech
