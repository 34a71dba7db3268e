"""Profile API: the caller's own account and technician profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from techmarket.db import crud
from techmarket.db.engine import get_db
from techmarket.dependencies import require_auth, require_technician
from techmarket.errors import NotFound
from techmarket.schemas import UserRead, TechnicianRead, TechnicianProfileUpdate
from techmarket.services.accounts import save_technician_profile
from techmarket.services.auth import AuthContext

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("/me", response_model=UserRead)
async def get_me(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    user = await crud.get_user(db, auth.user_id)
    if not user:
        raise NotFound("User not found")
    return user


@router.get("/technician/me", response_model=TechnicianRead)
async def get_my_technician_profile(
    auth: AuthContext = Depends(require_technician),
    db: AsyncSession = Depends(get_db),
):
    tech = await crud.get_technician_for_user(db, auth.user_id)
    if not tech:
        raise NotFound("Technician profile not found")
    return tech


@router.post("/technician", response_model=TechnicianRead)
async def save_my_technician_profile(
    body: TechnicianProfileUpdate,
    auth: AuthContext = Depends(require_technician),
    db: AsyncSession = Depends(get_db),
):
    tech, created = await save_technician_profile(db, auth.user_id, body.model_dump())
    payload = TechnicianRead.model_validate(tech).model_dump(mode="json")
    return JSONResponse(status_code=201 if created else 200, content=payload)
