from __future__ import annotations

from typing import Any, Iterable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.ids import slugify
from app.models.base import utcnow
from app.models.builder import Builder
from app.models.listing import Listing
from app.schemas.listing import ListingSubmit
from app.services.errors import InvalidTransition, NotFound, ValidationError

REVIEW_STATES = ("pending", "approved", "rejected")
VISIBILITIES = ("public", "featured")

# Reopening approved/rejected listings is not supported.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"approved", "rejected"}),
    "approved": frozenset(),
    "rejected": frozenset(),
}


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Tags are a set: trimmed, lower-cased, de-duplicated, sorted."""
    return sorted({t.strip().lower() for t in tags if t and t.strip()})


async def get_listing(db: AsyncSession, listing_id: str) -> Listing | None:
    return await db.get(Listing, listing_id)


async def get_listing_by_slug(db: AsyncSession, slug: str) -> Listing | None:
    """Returns the listing in any review state; callers enforce visibility."""
    stmt = select(Listing).where(Listing.slug == slug)
    return (await db.execute(stmt)).scalar_one_or_none()


async def list_pending(db: AsyncSession) -> list[Listing]:
    # oldest first so nothing starves in the queue
    stmt = (
        select(Listing)
        .where(Listing.review_state == "pending")
        .order_by(Listing.created_at.asc(), Listing.id.asc())
    )
    return list((await db.execute(stmt)).scalars().all())


async def list_by_builder(db: AsyncSession, builder_id: str, *, approved_only: bool = False) -> list[Listing]:
    stmt = select(Listing).where(Listing.builder_id == builder_id)
    if approved_only:
        stmt = stmt.where(Listing.review_state == "approved")
    stmt = stmt.order_by(Listing.created_at.desc(), Listing.id.asc())
    return list((await db.execute(stmt)).scalars().all())


async def list_public(db: AsyncSession) -> list[Listing]:
    """Approved listings, featured first, then newest."""
    stmt = (
        select(Listing)
        .where(Listing.review_state == "approved")
        .order_by(
            (Listing.visibility == "featured").desc(),
            Listing.created_at.desc(),
            Listing.id.asc(),
        )
    )
    return list((await db.execute(stmt)).scalars().all())


async def get_builder_by_slug(db: AsyncSession, slug: str) -> Builder | None:
    stmt = select(Builder).where(Builder.slug == slug)
    return (await db.execute(stmt)).scalar_one_or_none()


async def _unique_slug(db: AsyncSession, column, base: str) -> str:
    taken = set((await db.execute(select(column).where(column.like(f"{base}%")))).scalars().all())
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


async def _unique_listing_slug(db: AsyncSession, name: str) -> str:
    return await _unique_slug(db, Listing.slug, slugify(name, fallback="listing"))


async def get_or_create_builder(db: AsyncSession, submission: ListingSubmit) -> Builder:
    """
    Builders are keyed by the slug of their name together with the wallet that
    first submitted under it. The same name from another wallet gets a builder
    of its own (``acme-labs-2``); a submission never rewrites or joins another
    wallet's builder.
    """
    data = submission.builder
    base = slugify(data.name, fallback="builder")
    stmt = (
        select(Builder)
        .where(
            Builder.owner_wallet == submission.submitter_wallet,
            (Builder.slug == base) | Builder.slug.like(f"{base}-%"),
        )
        .order_by(Builder.created_at.asc(), Builder.id.asc())
        .limit(1)
    )
    builder = (await db.execute(stmt)).scalar_one_or_none()
    if builder is not None:
        return builder

    builder = Builder(
        slug=await _unique_slug(db, Builder.slug, base),
        owner_wallet=submission.submitter_wallet,
        name=data.name,
        bio=data.bio,
        website=str(data.website) if data.website else None,
        twitter=data.twitter,
        github=data.github,
    )
    db.add(builder)
    await db.flush()
    return builder


async def create_listing(db: AsyncSession, submission: ListingSubmit) -> Listing:
    """Create a pending listing. IntegrityError on a slug race is left to the caller."""
    builder = await get_or_create_builder(db, submission)

    listing = Listing(
        slug=await _unique_listing_slug(db, submission.name),
        name=submission.name,
        type=submission.type,
        short_description=submission.short_description,
        long_description=submission.long_description,
        tags=normalize_tags(submission.tags),
        categories=normalize_tags(submission.categories),
        links={kind: str(url) for kind, url in submission.links.items()},
        icon_url=str(submission.icon_url) if submission.icon_url else None,
        thumbnail_url=str(submission.thumbnail_url) if submission.thumbnail_url else None,
        status=submission.status,
        think_fit=submission.think_fit,
        review_state="pending",
        visibility=None,
        submitter_wallet=submission.submitter_wallet,
        builder=builder,
    )
    db.add(listing)
    await db.flush()
    return listing


async def update_review_state(
    db: AsyncSession,
    listing_id: str,
    new_state: str,
    *,
    expected_state: str = "pending",
    visibility: str | None = None,
    rejection_reason: str | None = None,
) -> Listing:
    """
    Compare-and-set the review state of one listing.

    The UPDATE only matches while the row is still in ``expected_state``, so of
    two racing transitions exactly one applies. Raises NotFound for an unknown
    id and InvalidTransition when the state already moved or the target state
    is not reachable. Nothing is written on failure.
    """
    if new_state not in ALLOWED_TRANSITIONS.get(expected_state, frozenset()):
        raise InvalidTransition(f"Cannot move listing from {expected_state} to {new_state}")

    if new_state == "approved":
        if visibility not in VISIBILITIES:
            raise ValidationError(f"Unknown visibility: {visibility!r}")
    elif visibility is not None:
        raise ValidationError("Visibility applies to approved listings only")

    now = utcnow()
    values: dict[str, Any] = {
        "review_state": new_state,
        "visibility": visibility,
        "rejection_reason": rejection_reason,
        "reviewed_at": now,
        "updated_at": now,
    }
    stmt = (
        update(Listing)
        .where(Listing.id == listing_id, Listing.review_state == expected_state)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)

    if result.rowcount == 0:
        current = (
            await db.execute(select(Listing.review_state).where(Listing.id == listing_id))
        ).scalar_one_or_none()
        if current is None:
            raise NotFound("Listing not found")
        raise InvalidTransition(f"Listing is already {current}")

    listing = await db.get(Listing, listing_id, populate_existing=True)
    assert listing is not None
    return listing
