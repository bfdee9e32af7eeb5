"""
Domain errors raised by the store, the session gate and the review handler.

Each carries the HTTP status and a stable machine code; the API layer renders
them as ``{"error": message, "code": code}``.
"""
from __future__ import annotations


class MarketplaceError(Exception):
    status_code = 400
    code = "error"

    def __init__(self, message: str, *, headers: dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        self.headers = headers


class Unauthorized(MarketplaceError):
    status_code = 401
    code = "unauthorized"


class NotFound(MarketplaceError):
    status_code = 404
    code = "not_found"


class InvalidTransition(MarketplaceError):
    status_code = 409
    code = "invalid_transition"


class Conflict(MarketplaceError):
    status_code = 409
    code = "conflict"


class ValidationError(MarketplaceError):
    status_code = 422
    code = "validation_error"


class RateLimited(MarketplaceError):
    status_code = 429
    code = "rate_limited"


class TransientIO(MarketplaceError):
    status_code = 503
    code = "transient_io"
