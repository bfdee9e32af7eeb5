"""
Operator-side view of the pending queue.

The queue holds no authority: it mirrors what the API confirmed. A listing
leaves the local view only after its approve/reject call succeeded, and at most
one action per listing is in flight at a time.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from app.services.http_client import AdminApiClient, HttpResult

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionOutcome:
    listing_id: str
    ok: bool
    error: str | None = None
    listing: dict[str, Any] | None = None


class ModerationQueue:
    def __init__(self, api: AdminApiClient):
        self._api = api
        self._in_flight: set[str] = set()
        self.listings: list[dict[str, Any]] = []
        self.authenticated = False
        self.last_error: str | None = None

    def is_busy(self, listing_id: str) -> bool:
        return listing_id in self._in_flight

    def get(self, listing_id: str) -> dict[str, Any] | None:
        return next((item for item in self.listings if item.get("id") == listing_id), None)

    async def status(self) -> bool:
        res = await self._api.status()
        self.authenticated = bool(res.ok and res.detail.get("authenticated"))
        return self.authenticated

    async def login(self, code: str) -> bool:
        res = await self._api.login(code)
        if not res.ok:
            self.authenticated = False
            self.last_error = res.error_message or "Login failed"
            return False
        self.authenticated = True
        self.last_error = None
        return True

    async def logout(self) -> None:
        res = await self._api.logout()
        if not res.ok:
            log.warning("admin logout failed: %s", res.error_message)
        self.authenticated = False
        self.listings = []

    async def load(self) -> list[dict[str, Any]]:
        """Refresh from the API; on failure keep the last known list."""
        res = await self._api.pending()
        if not res.ok:
            self.last_error = res.error_message or "Failed to load pending listings"
            log.warning("failed to fetch pending listings: %s", self.last_error)
            if res.status_code == 401:
                self.authenticated = False
            return self.listings

        self.listings = list(res.detail.get("listings") or [])
        self.last_error = None
        return self.listings

    async def approve(self, listing_id: str, *, visibility: str = "public") -> ActionOutcome:
        return await self._dispatch(listing_id, lambda: self._api.approve(listing_id, visibility=visibility))

    async def reject(self, listing_id: str, *, reason: str | None = None) -> ActionOutcome:
        return await self._dispatch(listing_id, lambda: self._api.reject(listing_id, reason=reason))

    async def _dispatch(self, listing_id: str, call: Callable[[], Awaitable[HttpResult]]) -> ActionOutcome:
        if listing_id in self._in_flight:
            return ActionOutcome(listing_id=listing_id, ok=False, error="Action already in progress")

        self._in_flight.add(listing_id)
        try:
            res = await call()
        finally:
            self._in_flight.discard(listing_id)

        if not res.ok:
            error = res.error_message or "Action failed"
            self.last_error = error
            log.warning("review action on %s failed: %s", listing_id, error)
            return ActionOutcome(listing_id=listing_id, ok=False, error=error)

        self.listings = [item for item in self.listings if item.get("id") != listing_id]
        self.last_error = None
        return ActionOutcome(listing_id=listing_id, ok=True, listing=res.detail)
