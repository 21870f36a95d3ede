# dependencies.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jobreco.database import get_db
from jobreco.models.user import User
from jobreco.schemas.user import TokenData
from jobreco.services.errors import RecommendationError, status_code_for
from jobreco.services.profile_service import is_job_seeker
from jobreco.utils.jwt_handler import decode_access_token


# Tokens come from the external auth service; tokenUrl only feeds the OpenAPI docs.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    try:
        token_data = TokenData(user_id=int(user_id))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject") from exc
    user = db.get(User, token_data.user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def require_job_seeker(current_user: User = Depends(get_current_user)) -> User:
    if not is_job_seeker(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only students and alumni can use recommendations")
    return current_user


def http_error(exc: RecommendationError) -> HTTPException:
    return HTTPException(status_code=status_code_for(exc), detail=exc.message)
