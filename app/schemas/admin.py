from pydantic import BaseModel, Field

from app.schemas.listing import Visibility


class AdminLogin(BaseModel):
    code: str = Field(max_length=512)


class AdminStatusOut(BaseModel):
    authenticated: bool


class ApproveIn(BaseModel):
    visibility: Visibility = "public"


class RejectIn(BaseModel):
    reason: str | None = Field(default=None, max_length=2000)
