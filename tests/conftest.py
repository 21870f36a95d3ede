from __future__ import annotations

import os
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ["ORM_DB_URL"] = "sqlite:///./test.db"
    os.environ["ENVIRONMENT"] = "test"
    os.environ["JWT_SECRET"] = "test-secret"


@pytest.fixture(autouse=True)
def reset_database() -> None:
    from jobreco.database import Base, engine
    import jobreco.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture()
def db() -> Any:
    from jobreco.database import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client() -> Any:
    from jobreco.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_user(db) -> Callable[..., Any]:
    from jobreco.models.user import User

    counter = {"n": 0}

    def _make(**fields: Any) -> User:
        counter["n"] += 1
        fields.setdefault("email", f"user{counter['n']}@example.com")
        fields.setdefault("role", "student")
        user = User(**fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def employer(make_user) -> Any:
    return make_user(email="employer@example.com", name="Hiring Manager", role="employer", company="Acme")


@pytest.fixture()
def make_job(db, employer) -> Callable[..., Any]:
    from jobreco.models.jobs import Job

    def _make(**fields: Any) -> Job:
        fields.setdefault("title", "Software Engineer")
        fields.setdefault("description", "Build things")
        fields.setdefault("company", "Acme")
        fields.setdefault("employer_id", employer.id)
        job = Job(**fields)
        db.add(job)
        db.commit()
        db.refresh(job)
        return job

    return _make


@pytest.fixture()
def seeker(make_user) -> Any:
    return make_user(
        email="seeker@example.com",
        name="Sam Seeker",
        role="student",
        skills=["React", "Node"],
        location="Remote",
        experience="3 years",
        expected_salary_min=90000,
        expected_salary_max=110000,
    )


@pytest.fixture()
def auth_headers() -> Callable[[Any], dict[str, str]]:
    from jobreco.utils.jwt_handler import create_access_token

    def _headers(user: Any) -> dict[str, str]:
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers
