"""Auth API: registration and login."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from techmarket.db.engine import get_db
from techmarket.errors import InvalidCredentials
from techmarket.models.user import EMAIL_PATTERN, Role
from techmarket.services.accounts import register_account, authenticate
from techmarket.services.auth import create_access_token

router = APIRouter(prefix="/api/auth", tags=["auth"])


# ── Schemas ───────────────────────────────────────────────

class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str
    password: str = Field(min_length=6)
    role: str = Role.USER.value
    location: str | None = None

    model_config = {"str_strip_whitespace": True}

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = v.lower()
        if not EMAIL_PATTERN.fullmatch(v):
            raise ValueError("Please fill a valid email address")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str


def _token_response(user) -> dict:
    return {
        "token": create_access_token(user.id, user.role),
        "role": user.role,
        "user_id": user.id,
    }


# ── Register / Login ──────────────────────────────────────

@router.post("/register", status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    user = await register_account(
        db,
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role or Role.USER.value,
        location=body.location,
    )
    return _token_response(user)


@router.post("/login")
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await authenticate(db, body.email, body.password)
    if not user:
        raise InvalidCredentials()
    return _token_response(user)
