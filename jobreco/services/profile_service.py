# profile_service.py
from sqlalchemy.orm import Session

from jobreco.models.user import JOB_SEEKER_ROLES, User
from jobreco.services.errors import NotFoundError, RecommendationValidationError
from jobreco.services.match_score_service import UserProfile
from jobreco.services.skill_matcher import normalize_skills


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def is_job_seeker(user: User) -> bool:
    return (user.role or "").strip().lower() in JOB_SEEKER_ROLES


def profile_from_user(user: User) -> UserProfile:
    skills = user.skills if isinstance(user.skills, list) else []
    return UserProfile(
        user_id=user.id,
        role=user.role,
        skills=tuple(normalize_skills(skills)),
        location=user.location,
        experience=user.experience,
        salary_min=user.expected_salary_min,
        salary_max=user.expected_salary_max,
    )


def update_user_profile(db: Session, user: User, changes: dict) -> User:
    """Apply matching-relevant profile changes and persist them."""
    low = changes.get("expected_salary_min", user.expected_salary_min)
    high = changes.get("expected_salary_max", user.expected_salary_max)
    if low is not None and high is not None and low > high:
        raise RecommendationValidationError("expected_salary_min must not exceed expected_salary_max")
    if "skills" in changes and changes["skills"] is not None:
        changes = {**changes, "skills": normalize_skills(changes["skills"])}
    for field, value in changes.items():
        setattr(user, field, value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
