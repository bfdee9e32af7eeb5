from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_marketplace"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "builders",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("owner_wallet", sa.String(length=120), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("website", sa.String(length=1000), nullable=True),
        sa.Column("twitter", sa.String(length=100), nullable=True),
        sa.Column("github", sa.String(length=100), nullable=True),

        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),

        sa.UniqueConstraint("slug", name="uq_builders_slug"),
    )

    op.create_table(
        "listings",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("slug", sa.String(length=160), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("short_description", sa.String(length=500), nullable=False),
        sa.Column("long_description", sa.Text(), nullable=True),

        sa.Column("tags", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("categories", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("links", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),

        sa.Column("icon_url", sa.String(length=1000), nullable=True),
        sa.Column("thumbnail_url", sa.String(length=1000), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="concept"),
        sa.Column("think_fit", postgresql.JSONB(astext_type=sa.Text()), nullable=True),

        sa.Column("review_state", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("visibility", sa.String(length=20), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),

        sa.Column("submitter_wallet", sa.String(length=120), nullable=False),
        sa.Column("builder_id", sa.String(), sa.ForeignKey("builders.id"), nullable=False),

        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),

        sa.UniqueConstraint("slug", name="uq_listings_slug"),
        sa.CheckConstraint(
            "visibility IS NULL OR review_state = 'approved'",
            name="ck_listing_visibility_requires_approval",
        ),
    )

    op.create_index("ix_builders_owner_wallet", "builders", ["owner_wallet"])
    op.create_index("ix_listings_review_state_created_at", "listings", ["review_state", "created_at"])
    op.create_index("ix_listings_builder_id", "listings", ["builder_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("actor_session_id", sa.String(length=64), nullable=True),
        sa.Column("action", sa.String(length=120), nullable=False),
        sa.Column("target_type", sa.String(length=120), nullable=True),
        sa.Column("target_id", sa.String(length=200), nullable=True),
        sa.Column(
            "detail",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_target", "audit_logs", ["target_type", "target_id"])


def downgrade():
    op.drop_index("ix_audit_logs_target", table_name="audit_logs")
    op.drop_index("ix_audit_logs_action", table_name="audit_logs")
    op.drop_index("ix_audit_logs_created_at", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("ix_listings_builder_id", table_name="listings")
    op.drop_index("ix_listings_review_state_created_at", table_name="listings")
    op.drop_table("listings")

    op.drop_index("ix_builders_owner_wallet", table_name="builders")
    op.drop_table("builders")
