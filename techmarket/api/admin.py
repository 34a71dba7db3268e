"""Admin API: technician moderation, user roles, cascade deletes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from techmarket.db import crud
from techmarket.db.engine import get_db
from techmarket.dependencies import require_admin
from techmarket.schemas import TechnicianRead, TechnicianAdminRead, UserRead, RoleUpdate
from techmarket.services import cascade
from techmarket.services.accounts import change_user_role, set_technician_verification
from techmarket.services.auth import AuthContext

router = APIRouter(prefix="/api/admin", tags=["admin"])


# ── Technicians ───────────────────────────────────────────

@router.get("/unverified-technicians", response_model=list[TechnicianRead])
async def list_unverified_technicians(
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_technicians(db, verified=False)


@router.get("/all-technicians", response_model=list[TechnicianAdminRead])
async def list_all_technicians(
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_technicians(db)


@router.put("/technicians/{technician_id}/verify")
async def verify_technician(
    technician_id: str,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    tech = await set_technician_verification(db, technician_id, True)
    return {
        "msg": "Technician verified successfully",
        "technician": TechnicianRead.model_validate(tech).model_dump(mode="json"),
    }


@router.put("/technicians/{technician_id}/disapprove")
async def disapprove_technician(
    technician_id: str,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    tech = await set_technician_verification(db, technician_id, False)
    return {
        "msg": "Technician disapproved successfully",
        "technician": TechnicianRead.model_validate(tech).model_dump(mode="json"),
    }


@router.delete("/technicians/{technician_id}")
async def delete_technician(
    technician_id: str,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await cascade.delete_technician(db, technician_id)
    msg = (
        "Technician and associated user deleted successfully"
        if result.user_deleted
        else "Technician profile deleted successfully"
    )
    return {"msg": msg, **result.as_dict()}


# ── Users ─────────────────────────────────────────────────

@router.get("/users", response_model=list[UserRead])
async def list_users(
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_users(db)


@router.put("/users/{user_id}/role")
async def update_user_role(
    user_id: str,
    body: RoleUpdate,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await change_user_role(db, auth, user_id, body.role)
    return {
        "msg": f"User {user.email} role updated to {user.role}",
        "user": {"id": user.id, "email": user.email, "role": user.role},
    }


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await cascade.delete_user(db, user_id, auth)
    return {"msg": "User and all associated data deleted successfully", **result.as_dict()}
