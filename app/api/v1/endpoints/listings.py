import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.listing import ListingDetailOut, ListingOut, ListingsOut, ListingSubmit
from app.services import listing_store
from app.services.errors import Conflict, NotFound

log = logging.getLogger(__name__)
router = APIRouter()


@router.post("/listings", response_model=ListingOut, status_code=201)
async def submit_listing(payload: ListingSubmit, db: AsyncSession = Depends(get_db)) -> ListingOut:
    """
    Public submission. New listings always start pending and stay invisible
    until an admin approves them.
    """
    try:
        listing = await listing_store.create_listing(db, payload)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        log.exception("listing submission failed: integrity error")
        raise Conflict("Constraint violation")

    log.info("listing %s submitted (slug=%s)", listing.id, listing.slug)
    return ListingOut.from_row(listing)


@router.get("/listings", response_model=ListingsOut)
async def list_public_listings(db: AsyncSession = Depends(get_db)) -> ListingsOut:
    rows = await listing_store.list_public(db)
    return ListingsOut(listings=[ListingOut.from_row(r) for r in rows])


@router.get("/listings/{slug}", response_model=ListingDetailOut)
async def get_public_listing(slug: str, db: AsyncSession = Depends(get_db)) -> ListingDetailOut:
    listing = await listing_store.get_listing_by_slug(db, slug)
    # pending and rejected listings are indistinguishable from missing ones
    if listing is None or listing.review_state != "approved":
        raise NotFound("Listing not found")

    siblings = await listing_store.list_by_builder(db, listing.builder_id, approved_only=True)
    return ListingDetailOut(
        **ListingOut.from_row(listing).model_dump(),
        more_from_builder=[ListingOut.from_row(r) for r in siblings if r.id != listing.id],
    )
