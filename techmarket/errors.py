"""Domain errors raised by services and rendered by the app-level handlers."""

from __future__ import annotations


class MarketplaceError(Exception):
    """Base class; subclasses carry the HTTP status they map to."""

    status_code = 500
    default_detail = "Server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(MarketplaceError):
    status_code = 401
    default_detail = "Token is not valid or expired"


class InvalidCredentials(MarketplaceError):
    # Same message for unknown email and wrong password.
    status_code = 400
    default_detail = "Invalid credentials"


class Forbidden(MarketplaceError):
    status_code = 403
    default_detail = "Access denied"


class NotFound(MarketplaceError):
    status_code = 404
    default_detail = "Not found"


class Conflict(MarketplaceError):
    status_code = 409
    default_detail = "Conflict"


class InvalidRequest(MarketplaceError):
    status_code = 400
    default_detail = "Invalid request"


class ValidationError(MarketplaceError):
    status_code = 400
    default_detail = "Validation failed"
