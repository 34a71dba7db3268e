"""Authentication service: bcrypt passwords, stateless JWT access tokens."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta

import bcrypt
from fastapi import Request
from jose import JWTError, jwt

from techmarket.config import Settings, get_settings
from techmarket.errors import Unauthenticated
from techmarket.models.user import Role

logger = logging.getLogger(__name__)

_settings = get_settings()

TOKEN_HEADER = "x-auth-token"


@dataclass
class AuthContext:
    """The authenticated principal attached to a request."""

    user_id: str
    role: Role


def hash_password(plain: str, rounds: int | None = None) -> str:
    salt = bcrypt.gensalt(rounds or _settings.auth.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def create_access_token(user_id: str, role: str, settings: Settings | None = None) -> str:
    """Sign a token carrying {user: {id, role}} that expires after the configured lifetime."""
    settings = settings or _settings
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET is not configured; refusing to issue tokens")
    expires = datetime.now(timezone.utc) + timedelta(minutes=settings.auth.token_expire_minutes)
    payload = {
        "user": {"id": user_id, "role": getattr(role, "value", role)},
        "exp": expires,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.auth.jwt_algorithm)


def decode_access_token(token: str, settings: Settings | None = None) -> AuthContext:
    """Verify signature and expiry; raise Unauthenticated on any failure."""
    settings = settings or _settings
    if not settings.jwt_secret:
        logger.warning("Token rejected: JWT_SECRET is not configured")
        raise Unauthenticated()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.auth.jwt_algorithm])
        claim = payload["user"]
        return AuthContext(user_id=str(claim["id"]), role=Role(claim["role"]))
    except (JWTError, KeyError, TypeError, ValueError) as e:
        logger.warning("Token rejected: %s", e)
        raise Unauthenticated()


def extract_token(request: Request) -> str | None:
    """Token from the x-auth-token header, or a standard Authorization: Bearer header."""
    token = request.headers.get(TOKEN_HEADER)
    if token:
        return token.strip()
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def get_current_user(request: Request) -> AuthContext:
    """Read the request token, verify it, return AuthContext or raise 401."""
    token = extract_token(request)
    if not token:
        raise Unauthenticated("No token, authorization denied")
    return decode_access_token(token)
