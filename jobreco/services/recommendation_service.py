from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobreco.config import settings
from jobreco.models.application import Application
from jobreco.models.job_recommendation import JobRecommendation
from jobreco.models.jobs import Job
from jobreco.models.user import User
from jobreco.services import job_service, profile_service, recommendation_store
from jobreco.services.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    RecommendationValidationError,
    ScoringError,
)
from jobreco.services.match_score_service import score
from jobreco.services.ranking import rank_recommendations


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecommendationView:
    recommendation: JobRecommendation
    job: Job
    employer: User | None = None

    @property
    def match_score(self) -> int:
        return int(self.recommendation.match_score)

    @property
    def job_id(self) -> int:
        return self.job.id

    @property
    def job_created_at(self) -> datetime | None:
        return self.job.created_at


@dataclass(frozen=True)
class RecommendationBatch:
    items: list[RecommendationView]
    new_count: int


def _validate_query(limit: int, min_score: int) -> None:
    max_limit = settings.recommendation_max_limit
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1 or limit > max_limit:
        raise RecommendationValidationError(f"limit must be an integer between 1 and {max_limit}")
    if isinstance(min_score, bool) or not isinstance(min_score, int) or min_score < 0 or min_score > 100:
        raise RecommendationValidationError("min_score must be an integer between 0 and 100")


def _require_job_seeker(user: User) -> None:
    if not profile_service.is_job_seeker(user):
        raise PermissionDeniedError("Recommendations are only available to students and alumni")


def assemble_views(db: Session, recommendations: Iterable[JobRecommendation]) -> list[RecommendationView]:
    """Join recommendations with their jobs and employers using two batched reads."""
    recommendations = list(recommendations)
    jobs = job_service.get_jobs_by_ids(db, (rec.job_id for rec in recommendations))
    employers = job_service.get_employers_by_ids(db, (job.employer_id for job in jobs.values()))

    views: list[RecommendationView] = []
    for rec in recommendations:
        job = jobs.get(rec.job_id)
        if job is None:
            continue
        views.append(RecommendationView(recommendation=rec, job=job, employer=employers.get(job.employer_id)))
    return views


def _score_candidates(
    db: Session,
    user: User,
    candidates: list[Job],
    *,
    min_score: int,
) -> list[JobRecommendation]:
    profile = profile_service.profile_from_user(user)
    created: list[JobRecommendation] = []
    skipped = 0
    for job in candidates:
        try:
            result = score(profile, job_service.posting_from_job(job))
        except ScoringError as exc:
            skipped += 1
            logger.warning("Skipping job during scoring user_id=%s: %s", user.id, exc)
            continue
        except (TypeError, ValueError, AttributeError) as exc:
            skipped += 1
            logger.warning("Skipping malformed job_id=%s for user_id=%s: %s", job.id, user.id, exc)
            continue

        if result.score >= min_score:
            created.append(recommendation_store.upsert(db, user.id, job.id, result))

    if skipped:
        logger.warning("Scoring skipped %s of %s candidate jobs for user_id=%s", skipped, len(candidates), user.id)
    return created


def get_recommendations(
    db: Session,
    user_id: int,
    *,
    limit: int = 20,
    min_score: int = 40,
    refresh: bool = False,
) -> RecommendationBatch:
    _validate_query(limit, min_score)

    user = profile_service.get_user(db, user_id)
    _require_job_seeker(user)

    if refresh:
        recommendation_store.delete_all_for_user(db, user_id)

    existing = recommendation_store.find_for_user(db, user_id, min_score=min_score)
    if len(existing) >= limit and not refresh:
        views = assemble_views(db, existing)
        return RecommendationBatch(items=rank_recommendations(views, limit), new_count=0)

    applied = job_service.get_applied_job_ids(db, user_id)
    already_scored = recommendation_store.scored_job_ids(db, user_id)
    candidates = [
        job
        for job in job_service.list_active_jobs(db)
        if job.id not in applied and job.id not in already_scored
    ]

    created = _score_candidates(db, user, candidates, min_score=min_score)
    logger.info(
        "Recommendations user_id=%s existing=%s candidates=%s created=%s refresh=%s",
        user_id,
        len(existing),
        len(candidates),
        len(created),
        refresh,
    )

    views = assemble_views(db, [*existing, *created])
    return RecommendationBatch(items=rank_recommendations(views, limit), new_count=len(created))


def _single_view(db: Session, recommendation: JobRecommendation) -> RecommendationView:
    views = assemble_views(db, [recommendation])
    if not views:
        raise NotFoundError("Job not found")
    return views[0]


def get_recommendation(db: Session, user_id: int, recommendation_id: int) -> RecommendationView:
    view = _single_view(db, recommendation_store.get_for_user(db, user_id, recommendation_id))
    recommendation_store.mark_viewed(db, user_id, recommendation_id)
    return view


def mark_viewed(db: Session, user_id: int, recommendation_id: int) -> RecommendationView:
    return get_recommendation(db, user_id, recommendation_id)


def save_recommendation(db: Session, user_id: int, recommendation_id: int, saved: bool = True) -> RecommendationView:
    recommendation = recommendation_store.set_saved(db, user_id, recommendation_id, saved)
    return _single_view(db, recommendation)


def submit_feedback(db: Session, user_id: int, recommendation_id: int, rating: object) -> RecommendationView:
    recommendation = recommendation_store.set_feedback(db, user_id, recommendation_id, rating)
    return _single_view(db, recommendation)


def list_saved_recommendations(db: Session, user_id: int) -> list[RecommendationView]:
    return assemble_views(db, recommendation_store.list_saved(db, user_id))


def get_stats(db: Session, user_id: int) -> recommendation_store.RecommendationStats:
    return recommendation_store.stats(db, user_id)


def record_application(db: Session, user_id: int, job_id: int, cover_letter: str | None = None) -> Application:
    """Apply ``user_id`` to ``job_id`` and flag the matching recommendation as applied."""
    user = profile_service.get_user(db, user_id)
    if not profile_service.is_job_seeker(user):
        raise PermissionDeniedError("Employers and admins cannot apply for jobs")

    job = job_service.get_job(db, job_id)
    if job is None:
        raise NotFoundError("Job not found")
    if not job.is_active:
        raise ConflictError("This job is no longer accepting applications")
    if job.employer_id == user_id:
        raise PermissionDeniedError("You cannot apply to your own job posting")
    if job_id in job_service.get_applied_job_ids(db, user_id):
        raise ConflictError("You have already applied for this job")

    application = Application(
        job_id=job.id,
        applicant_id=user_id,
        employer_id=job.employer_id,
        cover_letter=cover_letter,
        status="pending",
    )
    db.add(application)
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("You have already applied for this job") from exc

    job_service.refresh_applications_count(db, job)
    db.commit()
    db.refresh(application)

    recommendation_store.mark_applied(db, user_id, job_id)
    return application
