"""Persistence for job recommendations, keyed by (user_id, job_id).

Each write commits on its own; callers never see a half-applied change.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from sqlalchemy import case, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobreco.models.application import Application
from jobreco.models.job_recommendation import JobRecommendation
from jobreco.models.jobs import Job
from jobreco.services.errors import NotFoundError, RecommendationValidationError
from jobreco.services.match_score_service import MatchResult, round_half_up


logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class RecommendationStats:
    total: int
    viewed: int
    saved: int
    applied: int
    average_score: int


def find_for_user(
    db: Session,
    user_id: int,
    *,
    min_score: int | None = None,
    limit: int | None = None,
) -> list[JobRecommendation]:
    applied_job_ids = select(Application.job_id).where(Application.applicant_id == user_id)
    stmt = (
        select(JobRecommendation)
        .join(Job, Job.id == JobRecommendation.job_id)
        .where(JobRecommendation.user_id == user_id)
        .where(Job.is_active.is_(True))
        .where(JobRecommendation.is_applied.is_(False))
        .where(JobRecommendation.job_id.not_in(applied_job_ids))
    )
    if min_score is not None:
        stmt = stmt.where(JobRecommendation.match_score >= min_score)
    stmt = stmt.order_by(JobRecommendation.match_score.desc(), JobRecommendation.id)
    if limit is not None:
        stmt = stmt.limit(limit)
    return list(db.execute(stmt).scalars().all())


def find_one(db: Session, user_id: int, job_id: int) -> JobRecommendation | None:
    stmt = select(JobRecommendation).where(
        JobRecommendation.user_id == user_id,
        JobRecommendation.job_id == job_id,
    )
    return db.execute(stmt).scalar_one_or_none()


def get_for_user(db: Session, user_id: int, recommendation_id: int) -> JobRecommendation:
    stmt = select(JobRecommendation).where(
        JobRecommendation.id == recommendation_id,
        JobRecommendation.user_id == user_id,
    )
    recommendation = db.execute(stmt).scalar_one_or_none()
    if recommendation is None:
        raise NotFoundError("Recommendation not found")
    return recommendation


def scored_job_ids(db: Session, user_id: int) -> set[int]:
    stmt = select(JobRecommendation.job_id).where(JobRecommendation.user_id == user_id)
    return set(db.execute(stmt).scalars().all())


def _apply_result(db: Session, recommendation: JobRecommendation, result: MatchResult) -> JobRecommendation:
    recommendation.match_score = result.score
    recommendation.match_details = asdict(result.details)
    db.add(recommendation)
    db.commit()
    db.refresh(recommendation)
    return recommendation


def upsert(db: Session, user_id: int, job_id: int, result: MatchResult) -> JobRecommendation:
    """Create the recommendation for (user_id, job_id), or update it in place if one exists."""
    existing = find_one(db, user_id, job_id)
    if existing is not None:
        return _apply_result(db, existing, result)

    recommendation = JobRecommendation(
        user_id=user_id,
        job_id=job_id,
        match_score=result.score,
        match_details=asdict(result.details),
    )
    db.add(recommendation)
    try:
        db.flush()
    except IntegrityError:
        # Another request inserted the same pair first; fall back to updating its row.
        db.rollback()
        logger.info("Recommendation insert conflict user_id=%s job_id=%s; retrying as update", user_id, job_id)
        existing = find_one(db, user_id, job_id)
        if existing is None:
            raise
        return _apply_result(db, existing, result)

    db.commit()
    db.refresh(recommendation)
    return recommendation


def mark_viewed(db: Session, user_id: int, recommendation_id: int) -> JobRecommendation:
    recommendation = get_for_user(db, user_id, recommendation_id)
    if not recommendation.is_viewed:
        recommendation.is_viewed = True
        db.commit()
        db.refresh(recommendation)
    return recommendation


def set_saved(db: Session, user_id: int, recommendation_id: int, saved: bool) -> JobRecommendation:
    recommendation = get_for_user(db, user_id, recommendation_id)
    recommendation.is_saved = bool(saved)
    db.commit()
    db.refresh(recommendation)
    return recommendation


def validate_rating(rating: object) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise RecommendationValidationError("Rating must be an integer between 1 and 5")
    if rating < MIN_RATING or rating > MAX_RATING:
        raise RecommendationValidationError("Rating must be between 1 and 5")
    return rating


def set_feedback(db: Session, user_id: int, recommendation_id: int, rating: object) -> JobRecommendation:
    value = validate_rating(rating)
    recommendation = get_for_user(db, user_id, recommendation_id)
    recommendation.feedback_rating = value
    db.commit()
    db.refresh(recommendation)
    return recommendation


def mark_applied(db: Session, user_id: int, job_id: int) -> JobRecommendation | None:
    recommendation = find_one(db, user_id, job_id)
    if recommendation is None:
        return None
    recommendation.is_applied = True
    db.commit()
    db.refresh(recommendation)
    return recommendation


def list_saved(db: Session, user_id: int) -> list[JobRecommendation]:
    stmt = (
        select(JobRecommendation)
        .join(Job, Job.id == JobRecommendation.job_id)
        .where(JobRecommendation.user_id == user_id)
        .where(JobRecommendation.is_saved.is_(True))
        .where(Job.is_active.is_(True))
        .order_by(JobRecommendation.updated_at.desc(), JobRecommendation.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


def delete_all_for_user(db: Session, user_id: int) -> int:
    result = db.execute(delete(JobRecommendation).where(JobRecommendation.user_id == user_id))
    db.commit()
    deleted = int(result.rowcount or 0)
    if deleted:
        logger.info("Deleted %s recommendations for user_id=%s", deleted, user_id)
    return deleted


def stats(db: Session, user_id: int) -> RecommendationStats:
    row = db.execute(
        select(
            func.count(JobRecommendation.id).label("total"),
            func.sum(case((JobRecommendation.is_viewed.is_(True), 1), else_=0)).label("viewed"),
            func.sum(case((JobRecommendation.is_saved.is_(True), 1), else_=0)).label("saved"),
            func.sum(case((JobRecommendation.is_applied.is_(True), 1), else_=0)).label("applied"),
            func.avg(JobRecommendation.match_score).label("avg_score"),
        ).where(JobRecommendation.user_id == user_id)
    ).one()

    return RecommendationStats(
        total=int(row.total or 0),
        viewed=int(row.viewed or 0),
        saved=int(row.saved or 0),
        applied=int(row.applied or 0),
        average_score=round_half_up(float(row.avg_score)) if row.avg_score is not None else 0,
    )
