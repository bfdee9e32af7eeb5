from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import httpx


HttpMethod = Literal["GET", "POST", "DELETE"]


@dataclass(frozen=True)
class HttpResult:
    ok: bool
    status_code: int | None
    detail: dict[str, Any]

    error_code: str | None = None
    error_message: str | None = None

    @property
    def transport_failed(self) -> bool:
        return self.status_code is None


def _is_json_response(resp: httpx.Response) -> bool:
    ct = (resp.headers.get("content-type") or "").lower()
    return "application/json" in ct or ct.endswith("+json")


def _cap_text(s: str, *, max_chars: int) -> str:
    if len(s) <= max_chars:
        return s
    return s[:max_chars] + f"...(truncated, {len(s)} chars)"


class AdminApiClient:
    """
    HTTP client for the admin review API, used by the moderation queue.

    - Keeps the admin session cookie in the underlying AsyncClient's jar.
    - Never retries; the operator re-triggers failed actions.
    - Returns structured results instead of raising on transport or HTTP errors.
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 20.0,
        max_response_body_chars: int = 2_000,
    ):
        self._base_url = base_url.rstrip("/")
        self._max_body = max_response_body_chars
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def request_json(
        self,
        *,
        method: HttpMethod,
        path: str,
        json_body: dict[str, Any] | None = None,
    ) -> HttpResult:
        url = f"{self._base_url}{path}"
        try:
            resp = await self._client.request(method=method, url=url, json=json_body)
        except httpx.TimeoutException as e:
            return HttpResult(
                ok=False,
                status_code=None,
                detail={"error": "timeout"},
                error_code="TIMEOUT",
                error_message=f"Request timed out: {e}",
            )
        except httpx.RequestError as e:
            # DNS errors, connection refused, TLS, etc.
            return HttpResult(
                ok=False,
                status_code=None,
                detail={"error": "request_error"},
                error_code="REQUEST_ERROR",
                error_message=f"Request failed: {e}",
            )

        detail: dict[str, Any]
        if _is_json_response(resp):
            try:
                parsed = resp.json()
                detail = parsed if isinstance(parsed, dict) else {"data": parsed}
            except ValueError:
                detail = {"raw": _cap_text(resp.text, max_chars=self._max_body)}
        else:
            detail = {"raw": _cap_text(resp.text, max_chars=self._max_body)}

        if 200 <= resp.status_code < 300:
            return HttpResult(ok=True, status_code=resp.status_code, detail=detail)

        # API errors look like {"error": "...", "code": "..."}
        message = detail.get("error") if isinstance(detail.get("error"), str) else None
        return HttpResult(
            ok=False,
            status_code=resp.status_code,
            detail=detail,
            error_code=str(detail.get("code") or f"HTTP_{resp.status_code}"),
            error_message=message or f"HTTP {resp.status_code}",
        )

    # admin endpoints
    async def status(self) -> HttpResult:
        return await self.request_json(method="GET", path="/v1/admin")

    async def login(self, code: str) -> HttpResult:
        return await self.request_json(method="POST", path="/v1/admin", json_body={"code": code})

    async def logout(self) -> HttpResult:
        return await self.request_json(method="DELETE", path="/v1/admin")

    async def pending(self) -> HttpResult:
        return await self.request_json(method="GET", path="/v1/admin/pending")

    async def approve(self, listing_id: str, *, visibility: str = "public") -> HttpResult:
        return await self.request_json(
            method="POST",
            path=f"/v1/admin/listings/{listing_id}/approve",
            json_body={"visibility": visibility},
        )

    async def reject(self, listing_id: str, *, reason: str | None = None) -> HttpResult:
        return await self.request_json(
            method="POST",
            path=f"/v1/admin/listings/{listing_id}/reject",
            json_body={"reason": reason},
        )
