"""Report schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from rideshare.schemas.envelope import ResultResponse


class ReportCreate(BaseModel):
    """Report another user."""

    model_config = ConfigDict(extra="forbid")

    reported_email: EmailStr = Field(..., max_length=255)
    title: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1, max_length=5000)


class ReportRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    report: ReportCreate


class ReportCreatedResponse(ResultResponse):
    report_id: int | None = None
