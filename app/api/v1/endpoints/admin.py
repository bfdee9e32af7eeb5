import logging

import redis
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.schemas.admin import AdminLogin, AdminStatusOut, ApproveIn, RejectIn
from app.schemas.listing import ListingOut, ListingsOut
from app.services import listing_store
from app.services.admin_session import AdminSession, AdminSessionGate, get_session_gate
from app.services.auth import get_session_token, require_admin_session
from app.services.errors import RateLimited, TransientIO
from app.services.rate_limit import FixedWindowRateLimiter, get_login_limiter
from app.services.review import approve_listing, reject_listing

log = logging.getLogger(__name__)
router = APIRouter()


async def _enforce_login_rate(limiter: FixedWindowRateLimiter, request: Request) -> None:
    client_ip = request.client.host if request.client else "unknown"
    try:
        res = await limiter.allow(
            key=client_ip,
            limit=settings.admin_login_rate_limit,
            window_seconds=settings.admin_login_window_seconds,
        )
    except redis.RedisError:
        log.exception("login rate limiter unavailable")
        raise TransientIO("Login temporarily unavailable")
    if not res.allowed:
        raise RateLimited("Too many login attempts", headers={"Retry-After": str(res.reset_seconds)})


def _set_session_cookie(response: Response, session: AdminSession) -> None:
    response.set_cookie(
        key=settings.admin_cookie_name,
        value=session.token,
        max_age=settings.admin_session_ttl_seconds,
        httponly=True,
        secure=settings.admin_cookie_secure,
        samesite="strict",
        path="/",
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.admin_cookie_name,
        path="/",
        httponly=True,
        secure=settings.admin_cookie_secure,
        samesite="strict",
    )


@router.get("/admin", response_model=AdminStatusOut)
async def admin_status(
    token: str | None = Depends(get_session_token),
    gate: AdminSessionGate = Depends(get_session_gate),
) -> AdminStatusOut:
    return AdminStatusOut(authenticated=gate.check(token))


@router.post("/admin", response_model=AdminStatusOut)
async def admin_login(
    payload: AdminLogin,
    request: Request,
    response: Response,
    gate: AdminSessionGate = Depends(get_session_gate),
    limiter: FixedWindowRateLimiter | None = Depends(get_login_limiter),
) -> AdminStatusOut:
    if limiter is not None:
        await _enforce_login_rate(limiter, request)

    session = gate.login(payload.code)
    _set_session_cookie(response, session)
    return AdminStatusOut(authenticated=True)


@router.delete("/admin", response_model=AdminStatusOut)
async def admin_logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    gate: AdminSessionGate = Depends(get_session_gate),
) -> AdminStatusOut:
    gate.logout(token)
    _clear_session_cookie(response)
    return AdminStatusOut(authenticated=False)


@router.get("/admin/pending", response_model=ListingsOut, dependencies=[Depends(require_admin_session)])
async def admin_pending(db: AsyncSession = Depends(get_db)) -> ListingsOut:
    rows = await listing_store.list_pending(db)
    return ListingsOut(listings=[ListingOut.from_row(r) for r in rows])


@router.post("/admin/listings/{listing_id}/approve", response_model=ListingOut)
async def admin_approve(
    listing_id: str,
    payload: ApproveIn | None = None,
    token: str | None = Depends(get_session_token),
    gate: AdminSessionGate = Depends(get_session_gate),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    visibility = payload.visibility if payload else "public"
    listing = await approve_listing(db=db, gate=gate, token=token, listing_id=listing_id, visibility=visibility)
    await db.commit()
    return ListingOut.from_row(listing)


@router.post("/admin/listings/{listing_id}/reject", response_model=ListingOut)
async def admin_reject(
    listing_id: str,
    payload: RejectIn | None = None,
    token: str | None = Depends(get_session_token),
    gate: AdminSessionGate = Depends(get_session_gate),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    listing = await reject_listing(
        db=db,
        gate=gate,
        token=token,
        listing_id=listing_id,
        reason=payload.reason if payload else None,
    )
    await db.commit()
    return ListingOut.from_row(listing)
