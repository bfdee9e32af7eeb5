from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.builder import BuilderOut
from app.schemas.listing import BuilderDetailOut, ListingOut
from app.services import listing_store
from app.services.errors import NotFound

router = APIRouter()


@router.get("/builders/{slug}", response_model=BuilderDetailOut)
async def get_builder(slug: str, db: AsyncSession = Depends(get_db)) -> BuilderDetailOut:
    builder = await listing_store.get_builder_by_slug(db, slug)
    if builder is None:
        raise NotFound("Builder not found")

    rows = await listing_store.list_by_builder(db, builder.id, approved_only=True)
    return BuilderDetailOut(
        **BuilderOut.from_row(builder).model_dump(),
        listings=[ListingOut.from_row(r) for r in rows],
    )
