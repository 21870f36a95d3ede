from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ApplicationCreate(BaseModel):
    job_id: int = Field(ge=1)
    cover_letter: str | None = Field(default=None, max_length=5000)


class ApplicationRead(BaseModel):
    id: int
    job_id: int
    applicant_id: int
    employer_id: int
    status: str
    cover_letter: str | None = None
    applied_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
