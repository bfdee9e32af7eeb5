from pydantic import AnyHttpUrl, BaseModel, Field, field_validator


class BuilderIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    bio: str | None = Field(default=None, max_length=2000)
    website: AnyHttpUrl | None = None
    twitter: str | None = Field(default=None, max_length=100)
    github: str | None = Field(default=None, max_length=100)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class BuilderSummary(BaseModel):
    id: str
    slug: str
    name: str
    bio: str | None
    website: str | None


class BuilderOut(BuilderSummary):
    twitter: str | None
    github: str | None

    @classmethod
    def from_row(cls, b) -> "BuilderOut":
        return cls(
            id=b.id,
            slug=b.slug,
            name=b.name,
            bio=b.bio,
            website=b.website,
            twitter=b.twitter,
            github=b.github,
        )
