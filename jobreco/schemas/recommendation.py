# recommendation.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jobreco.services.skill_matcher import coerce_skill_list


class MatchDetails(BaseModel):
    skill_score: float = 0.0
    location_score: float = 0.0
    experience_score: float = 0.0
    salary_score: float = 0.0
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    total_skills: int = 0
    location_matched: bool = False
    user_experience_years: float | None = None
    required_experience_years: float | None = None
    salary_overlap: bool | None = None


class EmployerSummary(BaseModel):
    id: int
    name: str | None = None
    company: str | None = None

    model_config = ConfigDict(from_attributes=True)


class JobSummary(BaseModel):
    id: int
    title: str
    company: str
    location: str | None = None
    job_type: str
    experience: str | None = None
    salary_min: int | None = None
    salary_max: int | None = None
    salary_currency: str = "USD"
    skills: list[str] = Field(default_factory=list)
    is_active: bool
    created_at: datetime | None = None
    employer: EmployerSummary | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("skills", mode="before")
    @classmethod
    def _coerce_skills(cls, v):
        # Job rows may carry a comma separated string or non-string items.
        try:
            return coerce_skill_list(v)
        except TypeError:
            return []


class RecommendationRead(BaseModel):
    id: int
    job_id: int
    match_score: int
    match_details: MatchDetails
    is_viewed: bool
    is_saved: bool
    is_applied: bool
    feedback_rating: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    job: JobSummary


class RecommendationListResponse(BaseModel):
    data: list[RecommendationRead] = Field(default_factory=list)
    count: int
    new_recommendations: int = 0


class SaveRecommendationRequest(BaseModel):
    is_saved: bool = True


class FeedbackRequest(BaseModel):
    # Range is checked by the service so out-of-range ratings get a 400, not a 422.
    rating: int


class RecommendationStatsResponse(BaseModel):
    total: int
    viewed: int
    saved: int
    applied: int
    average_score: int
