from __future__ import annotations

from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from jobreco.models.application import Application
from jobreco.models.jobs import Job
from jobreco.models.user import User
from jobreco.services.errors import ScoringError
from jobreco.services.match_score_service import JobPosting
from jobreco.services.skill_matcher import coerce_skill_list


def posting_from_job(job: Job) -> JobPosting:
    """Snapshot a job row for the scorer; raise ScoringError when the record is malformed."""
    try:
        skills = coerce_skill_list(job.skills)
    except TypeError as exc:
        raise ScoringError(job.id, str(exc)) from exc
    return JobPosting(
        job_id=job.id,
        is_active=bool(job.is_active),
        skills=tuple(skills),
        location=job.location,
        experience=job.experience,
        salary_min=job.salary_min,
        salary_max=job.salary_max,
        employer_id=job.employer_id,
        created_at=job.created_at,
    )


def list_active_jobs(db: Session) -> list[Job]:
    stmt = select(Job).where(Job.is_active.is_(True)).order_by(Job.id)
    return list(db.execute(stmt).scalars().all())


def get_job(db: Session, job_id: int) -> Job | None:
    return db.get(Job, job_id)


def get_jobs_by_ids(db: Session, job_ids: Iterable[int]) -> dict[int, Job]:
    ids = sorted(set(job_ids))
    if not ids:
        return {}
    stmt = select(Job).where(Job.id.in_(ids))
    return {job.id: job for job in db.execute(stmt).scalars().all()}


def get_employers_by_ids(db: Session, user_ids: Iterable[int]) -> dict[int, User]:
    ids = sorted({uid for uid in user_ids if uid is not None})
    if not ids:
        return {}
    stmt = select(User).where(User.id.in_(ids))
    return {user.id: user for user in db.execute(stmt).scalars().all()}


def get_applied_job_ids(db: Session, user_id: int) -> set[int]:
    stmt = select(Application.job_id).where(Application.applicant_id == user_id).distinct()
    return set(db.execute(stmt).scalars().all())


def refresh_applications_count(db: Session, job: Job) -> int:
    count = db.execute(select(func.count(Application.id)).where(Application.job_id == job.id)).scalar_one()
    job.applications_count = int(count)
    db.add(job)
    return job.applications_count
