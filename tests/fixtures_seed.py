from datetime import datetime, timedelta, timezone

import pytest

from app.schemas.listing import ListingSubmit
from app.services import listing_store


def submission(name: str = "Scout Agent", **overrides) -> dict:
    body = {
        "name": name,
        "type": "agent",
        "short_description": f"{name} does useful things",
        "long_description": "A longer description.",
        "tags": ["Research", "automation", "research "],
        "categories": ["productivity"],
        "links": {"website": "https://example.com/scout", "repo": "https://github.com/example/scout"},
        "status": "beta",
        "submitter_wallet": "0xabc123",
        "builder": {"name": "Acme Labs", "bio": "We build agents.", "website": "https://acme.example"},
    }
    body.update(overrides)
    return body


async def create_pending(db_session, name: str = "Scout Agent", *, created_at: datetime | None = None, **overrides):
    listing = await listing_store.create_listing(db_session, ListingSubmit(**submission(name, **overrides)))
    if created_at is not None:
        listing.created_at = created_at
    await db_session.commit()
    return listing


@pytest.fixture
async def pending_listing(db_session):
    return await create_pending(db_session)


@pytest.fixture
async def pending_queue(db_session):
    """Three pending listings submitted an hour apart, created out of order."""
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    newest = await create_pending(db_session, "Gamma Tool", type="tool", created_at=base + timedelta(hours=2))
    oldest = await create_pending(db_session, "Alpha App", type="app", created_at=base)
    middle = await create_pending(db_session, "Beta Agent", created_at=base + timedelta(hours=1))
    return [oldest, middle, newest]
