# recommendations.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from jobreco.config import settings
from jobreco.database import get_db
from jobreco.models.user import User
from jobreco.routers.dependencies import get_current_user, http_error, require_job_seeker
from jobreco.schemas.recommendation import (
    EmployerSummary,
    FeedbackRequest,
    JobSummary,
    MatchDetails,
    RecommendationListResponse,
    RecommendationRead,
    RecommendationStatsResponse,
    SaveRecommendationRequest,
)
from jobreco.services import recommendation_service
from jobreco.services.errors import RecommendationError
from jobreco.services.recommendation_service import RecommendationView


router = APIRouter(prefix="/recommendations", tags=["recommendations"])


def _to_read(view: RecommendationView) -> RecommendationRead:
    rec = view.recommendation
    employer = EmployerSummary.model_validate(view.employer) if view.employer is not None else None
    job = JobSummary.model_validate(view.job).model_copy(update={"employer": employer})
    return RecommendationRead(
        id=rec.id,
        job_id=rec.job_id,
        match_score=rec.match_score,
        match_details=MatchDetails(**(rec.match_details or {})),
        is_viewed=bool(rec.is_viewed),
        is_saved=bool(rec.is_saved),
        is_applied=bool(rec.is_applied),
        feedback_rating=rec.feedback_rating,
        created_at=rec.created_at,
        updated_at=rec.updated_at,
        job=job,
    )


@router.get("", response_model=RecommendationListResponse)
def get_recommendations_endpoint(
    limit: int = Query(default=settings.recommendation_default_limit, ge=1, le=settings.recommendation_max_limit),
    min_score: int = Query(default=settings.recommendation_default_min_score, ge=0, le=100),
    refresh: bool = Query(default=False),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_job_seeker),
) -> RecommendationListResponse:
    try:
        batch = recommendation_service.get_recommendations(
            db, current_user.id, limit=limit, min_score=min_score, refresh=refresh
        )
    except RecommendationError as exc:
        raise http_error(exc) from exc
    items = [_to_read(view) for view in batch.items]
    return RecommendationListResponse(data=items, count=len(items), new_recommendations=batch.new_count)


@router.get("/saved", response_model=RecommendationListResponse)
def get_saved_recommendations_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> RecommendationListResponse:
    items = [_to_read(view) for view in recommendation_service.list_saved_recommendations(db, current_user.id)]
    return RecommendationListResponse(data=items, count=len(items))


@router.get("/stats", response_model=RecommendationStatsResponse)
def get_recommendation_stats_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> RecommendationStatsResponse:
    stats = recommendation_service.get_stats(db, current_user.id)
    return RecommendationStatsResponse(
        total=stats.total,
        viewed=stats.viewed,
        saved=stats.saved,
        applied=stats.applied,
        average_score=stats.average_score,
    )


@router.get("/{recommendation_id}", response_model=RecommendationRead)
def get_recommendation_endpoint(
    recommendation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> RecommendationRead:
    try:
        view = recommendation_service.get_recommendation(db, current_user.id, recommendation_id)
    except RecommendationError as exc:
        raise http_error(exc) from exc
    return _to_read(view)


@router.put("/{recommendation_id}/view", response_model=RecommendationRead)
def mark_recommendation_viewed_endpoint(
    recommendation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> RecommendationRead:
    try:
        view = recommendation_service.mark_viewed(db, current_user.id, recommendation_id)
    except RecommendationError as exc:
        raise http_error(exc) from exc
    return _to_read(view)


@router.put("/{recommendation_id}/save", response_model=RecommendationRead)
def save_recommendation_endpoint(
    recommendation_id: int,
    payload: SaveRecommendationRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> RecommendationRead:
    saved = payload.is_saved if payload is not None else True
    try:
        view = recommendation_service.save_recommendation(db, current_user.id, recommendation_id, saved)
    except RecommendationError as exc:
        raise http_error(exc) from exc
    return _to_read(view)


@router.post("/{recommendation_id}/feedback", response_model=RecommendationRead)
def provide_feedback_endpoint(
    recommendation_id: int,
    payload: FeedbackRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> RecommendationRead:
    try:
        view = recommendation_service.submit_feedback(db, current_user.id, recommendation_id, payload.rating)
    except RecommendationError as exc:
        raise http_error(exc) from exc
    return _to_read(view)
