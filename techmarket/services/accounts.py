"""Account lifecycle: registration, role changes, verification, profile edits."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from techmarket.db import crud
from techmarket.errors import Conflict, Forbidden, InvalidRequest, NotFound, Unauthenticated
from techmarket.models import Role, Technician, User, ROLES
from techmarket.services.auth import AuthContext, hash_password, verify_password

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "User with this email already exists"
ACCOUNT_GONE = "User account no longer exists"


async def require_account(db: AsyncSession, user_id: str) -> User:
    """The caller's User row. A token that outlives its account is rejected."""
    user = await crud.get_user(db, user_id)
    if not user:
        raise Unauthenticated(ACCOUNT_GONE)
    return user


async def register_account(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    role: str = Role.USER.value,
    location: str | None = None,
) -> User:
    """Create a user; technicians also get an unverified placeholder profile.

    Both rows are committed together.
    """
    if role not in (Role.USER.value, Role.TECHNICIAN.value):
        raise InvalidRequest("Role must be 'user' or 'technician'")
    if await crud.get_user_by_email(db, email):
        raise InvalidRequest(EMAIL_TAKEN)

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role,
        location=location or "Unspecified",
    )
    db.add(user)
    await db.flush()  # assigns user.id

    if role == Role.TECHNICIAN.value:
        db.add(crud.new_placeholder_technician(user))

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise InvalidRequest(EMAIL_TAKEN)
    await db.refresh(user)
    logger.info("Registered %s %s", user.role, user.id)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    """The matching user, or None for an unknown email or a wrong password."""
    user = await crud.get_user_by_email(db, email)
    if not user:
        return None
    try:
        if not verify_password(password, user.password_hash):
            return None
    except ValueError:
        logger.warning("Malformed password hash for user %s", user.id)
        return None
    return user


async def change_user_role(db: AsyncSession, actor: AuthContext, user_id: str, role: str) -> User:
    """Set a user's role; promoting to technician creates a placeholder profile."""
    if role not in ROLES:
        raise InvalidRequest("Invalid role provided")

    user = await crud.get_user(db, user_id)
    if not user:
        raise NotFound("User not found")

    if actor.user_id == user_id and role != Role.ADMIN.value:
        raise Forbidden("Cannot demote yourself")

    previous = user.role
    user.role = role
    if role == Role.TECHNICIAN.value and not await crud.get_technician_for_user(db, user.id):
        db.add(crud.new_placeholder_technician(user))
    await db.commit()
    logger.info("User %s role %s -> %s by admin %s", user.id, previous, role, actor.user_id)
    return user


async def set_technician_verification(db: AsyncSession, technician_id: str, verified: bool) -> Technician:
    """Verify or disapprove a profile; verifying also gives a plain user the technician role."""
    tech = await crud.get_technician(db, technician_id)
    if not tech:
        raise NotFound("Technician not found")
    if tech.is_verified_by_admin == verified:
        state = "verified" if verified else "unverified"
        raise Conflict(f"Technician is already {state}.")

    tech.is_verified_by_admin = verified
    if verified and tech.user is not None and tech.user.role == Role.USER:
        tech.user.role = Role.TECHNICIAN
    await db.commit()
    logger.info("Technician %s %s", technician_id, "verified" if verified else "disapproved")
    return await crud.get_technician(db, technician_id)


async def save_technician_profile(db: AsyncSession, user_id: str, fields: dict) -> tuple[Technician, bool]:
    """Create or update the caller's own profile. Returns (profile, created)."""
    fields = {k: v for k, v in fields.items() if v is not None}
    tech = await crud.get_technician_for_user(db, user_id)
    if tech:
        return await crud.update_technician(db, tech, **fields), False

    user = await crud.get_user(db, user_id)
    if not user:
        raise NotFound("User not found")
    tech = crud.new_placeholder_technician(user)
    for k, v in fields.items():
        setattr(tech, k, v)
    db.add(tech)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Technician profile already exists")
    return await crud.get_technician(db, tech.id), True
