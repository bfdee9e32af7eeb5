from datetime import datetime
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, field_validator

from app.schemas.builder import BuilderIn, BuilderOut, BuilderSummary

ListingType = Literal["agent", "tool", "app"]
ListingStatus = Literal["live", "beta", "concept"]
LinkKind = Literal["website", "demo", "docs", "repo", "waitlist"]
Visibility = Literal["public", "featured"]


class ListingSubmit(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    type: ListingType
    short_description: str = Field(min_length=1, max_length=500)
    long_description: str | None = Field(default=None, max_length=10_000)

    tags: list[str] = Field(default_factory=list, max_length=20)
    categories: list[str] = Field(default_factory=list, max_length=10)
    links: dict[LinkKind, AnyHttpUrl] = Field(default_factory=dict)

    icon_url: AnyHttpUrl | None = None
    thumbnail_url: AnyHttpUrl | None = None

    status: ListingStatus = "concept"
    think_fit: dict | None = None

    submitter_wallet: str = Field(min_length=1, max_length=120)
    builder: BuilderIn

    @field_validator("name", "short_description", "submitter_wallet")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ListingOut(BaseModel):
    id: str
    slug: str
    name: str
    type: str
    short_description: str
    long_description: str | None
    tags: list[str]
    categories: list[str]
    links: dict[str, str]
    icon_url: str | None
    thumbnail_url: str | None
    status: str
    think_fit: dict | None

    review_state: str
    visibility: str | None
    rejection_reason: str | None
    reviewed_at: datetime | None

    submitter_wallet: str
    builder_id: str
    builder: BuilderSummary | None

    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, r) -> "ListingOut":
        b = r.builder
        return cls(
            id=r.id,
            slug=r.slug,
            name=r.name,
            type=r.type,
            short_description=r.short_description,
            long_description=r.long_description,
            tags=list(r.tags or []),
            categories=list(r.categories or []),
            links=dict(r.links or {}),
            icon_url=r.icon_url,
            thumbnail_url=r.thumbnail_url,
            status=r.status,
            think_fit=r.think_fit,
            review_state=r.review_state,
            visibility=r.visibility,
            rejection_reason=r.rejection_reason,
            reviewed_at=r.reviewed_at,
            submitter_wallet=r.submitter_wallet,
            builder_id=r.builder_id,
            builder=(
                BuilderSummary(id=b.id, slug=b.slug, name=b.name, bio=b.bio, website=b.website)
                if b is not None
                else None
            ),
            created_at=r.created_at,
            updated_at=r.updated_at,
        )


class ListingDetailOut(ListingOut):
    more_from_builder: list[ListingOut] = Field(default_factory=list)


class ListingsOut(BaseModel):
    listings: list[ListingOut]


class BuilderDetailOut(BuilderOut):
    listings: list[ListingOut] = Field(default_factory=list)
