from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from jobreco.config import build_sqlalchemy_db_url, settings  # noqa: E402
from jobreco.database import Base, SessionLocal, engine  # noqa: E402
from jobreco.models.jobs import Job  # noqa: E402
from jobreco.models.user import User  # noqa: E402
from jobreco.utils.jwt_handler import create_access_token  # noqa: E402


DEMO_JOBS = [
    {
        "title": "Frontend Engineer",
        "description": "Build the job board UI.",
        "location": "Remote",
        "experience": "2-4 years",
        "salary_min": 80000,
        "salary_max": 120000,
        "skills": ["react", "typescript"],
    },
    {
        "title": "Backend Engineer",
        "description": "Own the REST API.",
        "location": "Lahore",
        "experience": "3+ years",
        "salary_min": 70000,
        "salary_max": 100000,
        "skills": ["node", "mongodb", "express"],
    },
    {
        "title": "Data Analyst Intern",
        "description": "Dashboards and reporting.",
        "location": "Karachi",
        "experience": "entry level",
        "salary_min": 20000,
        "salary_max": 30000,
        "skills": ["sql", "excel"],
    },
]


def _ensure_tables() -> None:
    if build_sqlalchemy_db_url(settings).startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


def _get_or_create_user(db, *, email: str, **fields) -> User:
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email, **fields)
        db.add(user)
        db.commit()
        db.refresh(user)
    return user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed a demo job seeker, an employer and a few active jobs.")
    parser.add_argument("--seeker-email", default="student@example.com")
    parser.add_argument("--employer-email", default="employer@example.com")
    args = parser.parse_args(argv)

    _ensure_tables()

    with SessionLocal() as db:
        employer = _get_or_create_user(
            db, email=args.employer_email, name="Demo Employer", role="employer", company="Acme"
        )
        seeker = _get_or_create_user(
            db,
            email=args.seeker_email,
            name="Demo Student",
            role="student",
            skills=["react", "node"],
            location="Remote",
            experience="3 years",
            expected_salary_min=90000,
            expected_salary_max=110000,
        )

        created = 0
        for fields in DEMO_JOBS:
            exists = db.query(Job).filter(Job.title == fields["title"], Job.employer_id == employer.id).first()
            if exists is not None:
                continue
            db.add(Job(company=employer.company or "Acme", employer_id=employer.id, **fields))
            created += 1
        db.commit()

        token = create_access_token({"sub": str(seeker.id)})

    print(f"seeker id={seeker.id} employer id={employer.id} jobs created={created}")
    print(f"bearer token: {token}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
