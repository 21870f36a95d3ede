from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime

from jobreco.services.errors import ScoringError
from jobreco.services.skill_matcher import match_skills


logger = logging.getLogger(__name__)


SKILL_WEIGHT = 50.0
LOCATION_WEIGHT = 20.0
EXPERIENCE_WEIGHT = 15.0
SALARY_WEIGHT = 15.0

# Fraction of the experience weight awarded as the user's years approach the requirement.
_EXPERIENCE_STEPS = ((1.0, 1.0), (0.75, 0.8), (0.5, 0.6))
_EXPERIENCE_FLOOR = 0.4
_NEUTRAL = 0.5

_YEARS_RE = re.compile(r"(\d+(?:\.\d+)?)")
# Larger numbers are calendar years ("since 2018"), not a duration.
_MAX_PLAUSIBLE_YEARS = 60.0
_ZERO_EXPERIENCE_TERMS = ("entry level", "entry-level", "fresher", "no experience", "graduate", "intern")
_ANYWHERE_TERMS = ("remote", "anywhere")


@dataclass(frozen=True)
class UserProfile:
    user_id: int
    role: str | None = None
    skills: tuple[str, ...] = ()
    location: str | None = None
    experience: str | None = None
    salary_min: int | None = None
    salary_max: int | None = None


@dataclass(frozen=True)
class JobPosting:
    job_id: int
    is_active: bool = True
    skills: tuple[str, ...] = ()
    location: str | None = None
    experience: str | None = None
    salary_min: int | None = None
    salary_max: int | None = None
    employer_id: int | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class MatchBreakdown:
    skill_score: float
    location_score: float
    experience_score: float
    salary_score: float
    matched_skills: list[str] = field(default_factory=list)
    missing_skills: list[str] = field(default_factory=list)
    total_skills: int = 0
    location_matched: bool = False
    user_experience_years: float | None = None
    required_experience_years: float | None = None
    salary_overlap: bool | None = None


@dataclass(frozen=True)
class MatchResult:
    score: int
    details: MatchBreakdown


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_experience_years(value: str | None, *, source: str = "") -> float | None:
    """Return the minimum years stated in ``value``.

    "3 years" -> 3, "2-4 years" -> 2, "5+ yrs" -> 5, "entry level" -> 0.
    Returns None for missing or unparseable text.
    """
    if value is None:
        return None
    text = str(value).strip().lower()
    if not text:
        return None
    numbers = [float(match.group(1)) for match in _YEARS_RE.finditer(text)]
    plausible = [years for years in numbers if years <= _MAX_PLAUSIBLE_YEARS]
    if plausible:
        return plausible[0]
    if not numbers and any(term in text for term in _ZERO_EXPERIENCE_TERMS):
        return 0.0
    logger.warning("Unparseable experience text %s=%r; using neutral credit", source or "value", value)
    return None


def _skill_component(user: UserProfile, job: JobPosting) -> tuple[float, list[str], list[str]]:
    matched, missing = match_skills(user.skills, job.skills)
    total = len(matched) + len(missing)
    if total == 0 or not user.skills:
        return 0.0, matched, missing
    return SKILL_WEIGHT * len(matched) / total, matched, missing


def _location_component(user: UserProfile, job: JobPosting) -> tuple[float, bool]:
    user_location = (user.location or "").strip().lower()
    job_location = (job.location or "").strip().lower()
    if not user_location or not job_location:
        return 0.0, False
    matched = (
        user_location in job_location
        or job_location in user_location
        or any(term in job_location for term in _ANYWHERE_TERMS)
    )
    return (LOCATION_WEIGHT if matched else 0.0), matched


def _experience_component(user: UserProfile, job: JobPosting) -> tuple[float, float | None, float | None]:
    user_years = parse_experience_years(user.experience, source=f"user {user.user_id} experience")
    required_years = parse_experience_years(job.experience, source=f"job {job.job_id} experience")
    if user_years is None or required_years is None:
        return EXPERIENCE_WEIGHT * _NEUTRAL, user_years, required_years
    if required_years <= 0:
        return EXPERIENCE_WEIGHT, user_years, required_years

    for ratio, credit in _EXPERIENCE_STEPS:
        if user_years >= required_years * ratio:
            return EXPERIENCE_WEIGHT * credit, user_years, required_years
    return EXPERIENCE_WEIGHT * _EXPERIENCE_FLOOR, user_years, required_years


def _coerce_salary(value: object, *, job_id: object) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ScoringError(job_id, f"salary value {value!r} is not numeric") from exc


def _salary_component(user: UserProfile, job: JobPosting) -> tuple[float, bool | None]:
    user_low = _coerce_salary(user.salary_min, job_id=job.job_id)
    user_high = _coerce_salary(user.salary_max, job_id=job.job_id)
    job_low = _coerce_salary(job.salary_min, job_id=job.job_id)
    job_high = _coerce_salary(job.salary_max, job_id=job.job_id)

    if (user_low is None and user_high is None) or (job_low is None and job_high is None):
        return SALARY_WEIGHT * _NEUTRAL, None

    # A missing bound leaves that side of the range open.
    low = max(user_low if user_low is not None else float("-inf"), job_low if job_low is not None else float("-inf"))
    high = min(user_high if user_high is not None else float("inf"), job_high if job_high is not None else float("inf"))
    overlap = low <= high
    return (SALARY_WEIGHT if overlap else 0.0), overlap


def score(user: UserProfile, job: JobPosting) -> MatchResult:
    """Score how well ``job`` fits ``user`` on a 0-100 scale.

    Pure function of its inputs: skills (50), location (20), experience (15)
    and salary (15). Missing data never raises; malformed job records raise
    ScoringError.
    """
    if job.job_id is None:
        raise ScoringError(None, "job has no identifier")
    if user.user_id is None:
        raise ScoringError(job.job_id, "user has no identifier")

    skill_score, matched, missing = _skill_component(user, job)
    location_score, location_matched = _location_component(user, job)
    experience_score, user_years, required_years = _experience_component(user, job)
    salary_score, salary_overlap = _salary_component(user, job)

    total = max(0, min(100, round_half_up(skill_score + location_score + experience_score + salary_score)))

    details = MatchBreakdown(
        skill_score=round(skill_score, 2),
        location_score=round(location_score, 2),
        experience_score=round(experience_score, 2),
        salary_score=round(salary_score, 2),
        matched_skills=matched,
        missing_skills=missing,
        total_skills=len(matched) + len(missing),
        location_matched=location_matched,
        user_experience_years=user_years,
        required_experience_years=required_years,
        salary_overlap=salary_overlap,
    )
    return MatchResult(score=total, details=details)
