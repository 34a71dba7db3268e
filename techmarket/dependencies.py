"""FastAPI dependency providers for auth and role enforcement."""

from __future__ import annotations

from fastapi import Depends, Request

from techmarket.errors import Forbidden
from techmarket.models.user import Role
from techmarket.services.auth import AuthContext, get_current_user


async def require_auth(request: Request) -> AuthContext:
    """Require a valid access token. Returns AuthContext."""
    return get_current_user(request)


def require_role(*allowed_roles: Role):
    """Factory: returns a dependency that enforces role membership."""
    allowed = ", ".join(r.value for r in allowed_roles)

    async def _check(auth: AuthContext = Depends(require_auth)) -> AuthContext:
        if auth.role not in allowed_roles:
            raise Forbidden(f"Access denied: requires role {allowed}")
        return auth
    return _check


require_user = require_role(Role.USER)
require_technician = require_role(Role.TECHNICIAN)
require_admin = require_role(Role.ADMIN)
