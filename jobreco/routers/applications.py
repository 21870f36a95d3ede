from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobreco.database import get_db
from jobreco.models.user import User
from jobreco.routers.dependencies import get_current_user, http_error
from jobreco.schemas.application import ApplicationCreate, ApplicationRead
from jobreco.services import recommendation_service
from jobreco.services.errors import RecommendationError


router = APIRouter(prefix="/applications", tags=["applications"])


@router.post("", response_model=ApplicationRead, status_code=status.HTTP_201_CREATED)
def apply_for_job(
    payload: ApplicationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApplicationRead:
    try:
        application = recommendation_service.record_application(
            db, current_user.id, payload.job_id, cover_letter=payload.cover_letter
        )
    except RecommendationError as exc:
        raise http_error(exc) from exc
    return ApplicationRead.model_validate(application)
