# users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from jobreco.database import get_db
from jobreco.models.user import User
from jobreco.routers.dependencies import get_current_user, http_error
from jobreco.schemas.user import UserRead, UserUpdate
from jobreco.services.errors import RecommendationError
from jobreco.services.profile_service import update_user_profile


router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)


@router.put("/me", response_model=UserRead)
def update_current_user(update: UserUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> UserRead:
    try:
        user = update_user_profile(db, current_user, update.model_dump(exclude_unset=True))
    except RecommendationError as exc:
        raise http_error(exc) from exc
    return UserRead.model_validate(user)
