"""
Review actions on submitted listings.

Both actions take the caller's session token explicitly and validate it on
every call; there is no ambient "current admin". The transition and its audit
row are flushed together and committed by the caller, so either both persist
or neither does.
"""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.listing import Listing
from app.services import listing_store
from app.services.admin_session import AdminSessionGate
from app.services.audit import audit
from app.services.errors import ValidationError

log = logging.getLogger(__name__)


async def approve_listing(
    *,
    db: AsyncSession,
    gate: AdminSessionGate,
    token: str | None,
    listing_id: str,
    visibility: str = "public",
) -> Listing:
    session = gate.authenticate(token)

    listing = await listing_store.update_review_state(
        db,
        listing_id,
        "approved",
        visibility=visibility,
    )
    await audit(
        db,
        actor_session_id=session.session_id,
        action="listing.approved",
        target_type="listing",
        target_id=listing.id,
        detail={"visibility": visibility},
    )
    await db.flush()

    log.info("listing %s approved (visibility=%s) by session %s", listing.id, visibility, session.session_id)
    return listing


async def reject_listing(
    *,
    db: AsyncSession,
    gate: AdminSessionGate,
    token: str | None,
    listing_id: str,
    reason: str | None = None,
) -> Listing:
    session = gate.authenticate(token)

    reason = (reason or "").strip() or None
    if reason is not None and len(reason) > 2000:
        raise ValidationError("Rejection reason too long")

    listing = await listing_store.update_review_state(
        db,
        listing_id,
        "rejected",
        rejection_reason=reason,
    )
    await audit(
        db,
        actor_session_id=session.session_id,
        action="listing.rejected",
        target_type="listing",
        target_id=listing.id,
        detail={"reason": reason} if reason else {},
    )
    await db.flush()

    log.info("listing %s rejected by session %s", listing.id, session.session_id)
    return listing
