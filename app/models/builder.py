from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.ids import gen_id
from app.models.base import Base, AuditMixin


class Builder(AuditMixin, Base):
    __tablename__ = "builders"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id("bld"))
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    # wallet of the first submission under this builder; later ones must match
    owner_wallet: Mapped[str] = mapped_column(String(120), nullable=False, index=True)

    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    website: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    twitter: Mapped[str | None] = mapped_column(String(100), nullable=True)
    github: Mapped[str | None] = mapped_column(String(100), nullable=True)
