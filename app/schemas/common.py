from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str
    code: str
    details: list[dict] = Field(default_factory=list)


class HealthOut(BaseModel):
    status: str
