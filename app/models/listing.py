from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.ids import gen_id

from app.models.base import Base, AuditMixin


class Listing(AuditMixin, Base):
    __tablename__ = "listings"
    __table_args__ = (
        # featured (or any visibility) only ever exists on an approved listing
        CheckConstraint(
            "visibility IS NULL OR review_state = 'approved'",
            name="ck_listing_visibility_requires_approval",
        ),
        Index("ix_listings_review_state_created_at", "review_state", "created_at"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id("lst"))
    slug: Mapped[str] = mapped_column(String(160), nullable=False, unique=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # "agent" | "tool" | "app"
    type: Mapped[str] = mapped_column(String(20), nullable=False)

    short_description: Mapped[str] = mapped_column(String(500), nullable=False)
    long_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    categories: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    # link kind -> url, e.g. {"website": "...", "repo": "..."}
    links: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    icon_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # product maturity: "live" | "beta" | "concept"
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="concept")
    think_fit: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    # "pending" | "approved" | "rejected"
    review_state: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    # "public" | "featured"; NULL until approved
    visibility: Mapped[str | None] = mapped_column(String(20), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    submitter_wallet: Mapped[str] = mapped_column(String(120), nullable=False)
    builder_id: Mapped[str] = mapped_column(String, ForeignKey("builders.id"), nullable=False, index=True)

    builder = relationship("Builder", lazy="joined")
