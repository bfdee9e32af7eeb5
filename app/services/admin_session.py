from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable

from app.core.config import settings
from app.core.security import generate_session_token, hash_token, secret_digest, secrets_match
from app.services.errors import Unauthorized

log = logging.getLogger(__name__)

# Placeholder values that mean "no admin code configured".
_UNSET_CODES = ("", "IN_ENV")

# Compared against when no code is configured so the failure path costs the same.
_DUMMY_DIGEST = secret_digest("admin-code-not-configured")


@dataclass(frozen=True)
class AdminSession:
    session_id: str
    expires_at: float
    token: str = field(repr=False)


class AdminSessionGate:
    """
    Single shared-secret gate for review actions.

    A session is a capability: whoever presents a live token may review. Only
    token digests and expiry times are kept, in process memory; none of the
    methods await, so each one runs to completion on the event loop.
    """

    def __init__(self, *, admin_code: str, ttl_seconds: int, clock: Callable[[], float] = time.time):
        self._code_digest = None if admin_code in _UNSET_CODES else secret_digest(admin_code)
        self._ttl = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, float] = {}

    @property
    def configured(self) -> bool:
        return self._code_digest is not None

    def login(self, code: str) -> AdminSession:
        if self._code_digest is None:
            secrets_match(code, _DUMMY_DIGEST)
            log.warning("admin login rejected: ADMIN_CODE is not configured")
            raise Unauthorized("Invalid admin code")

        if not secrets_match(code, self._code_digest):
            log.info("admin login rejected: wrong code")
            raise Unauthorized("Invalid admin code")

        self._prune()
        token = generate_session_token()
        expires_at = self._clock() + self._ttl
        self._sessions[token.hashed] = expires_at
        session = AdminSession(session_id=token.hashed[:16], expires_at=expires_at, token=token.plain)
        log.info("admin session %s opened", session.session_id)
        return session

    def authenticate(self, token: str | None) -> AdminSession:
        # absent, unknown, expired and logged-out tokens all look the same
        if not token:
            raise Unauthorized("Admin session required")
        hashed = hash_token(token)
        expires_at = self._sessions.get(hashed)
        if expires_at is None:
            raise Unauthorized("Admin session required")
        if expires_at <= self._clock():
            del self._sessions[hashed]
            raise Unauthorized("Admin session required")
        return AdminSession(session_id=hashed[:16], expires_at=expires_at, token=token)

    def check(self, token: str | None) -> bool:
        try:
            self.authenticate(token)
        except Unauthorized:
            return False
        return True

    def logout(self, token: str | None) -> None:
        if not token:
            return
        hashed = hash_token(token)
        if self._sessions.pop(hashed, None) is not None:
            log.info("admin session %s closed", hashed[:16])

    def _prune(self) -> None:
        now = self._clock()
        for hashed in [h for h, exp in self._sessions.items() if exp <= now]:
            del self._sessions[hashed]


@lru_cache
def get_session_gate() -> AdminSessionGate:
    return AdminSessionGate(
        admin_code=settings.admin_code.get_secret_value(),
        ttl_seconds=settings.admin_session_ttl_seconds,
    )
