from __future__ import annotations

import pytest

from jobreco.models.job_recommendation import JobRecommendation


def _seed_jobs(make_job):
    frontend = make_job(
        title="Frontend Engineer",
        skills=["react", "typescript"],
        location="Remote",
        experience="2-4 years",
        salary_min=80_000,
        salary_max=120_000,
    )
    backend = make_job(title="Node Developer", skills=["node", "express"], location="Remote", experience="1 year")
    make_job(title="Python Developer", skills=["python"], location="Berlin", experience="5 years")
    return frontend, backend


def test_requires_bearer_token(client) -> None:
    assert client.get("/api/recommendations").status_code == 401
    bad = client.get("/api/recommendations", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


def test_employers_are_forbidden(client, employer, auth_headers) -> None:
    r = client.get("/api/recommendations", headers=auth_headers(employer))
    assert r.status_code == 403


def test_list_recommendations_with_job_and_breakdown(client, seeker, make_job, auth_headers) -> None:
    frontend, backend = _seed_jobs(make_job)

    r = client.get("/api/recommendations", headers=auth_headers(seeker))
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 2
    assert body["new_recommendations"] == 2

    top = body["data"][0]
    assert top["job_id"] == frontend.id
    assert top["match_score"] == 75
    assert top["match_details"]["matched_skills"] == ["react"]
    assert top["match_details"]["skill_score"] == 25.0
    assert top["job"]["title"] == "Frontend Engineer"
    assert top["job"]["employer"]["company"] == "Acme"
    assert body["data"][1]["job_id"] == backend.id


def test_query_bounds_are_validated(client, seeker, auth_headers) -> None:
    headers = auth_headers(seeker)
    assert client.get("/api/recommendations?min_score=101", headers=headers).status_code == 422
    assert client.get("/api/recommendations?limit=0", headers=headers).status_code == 422
    assert client.get("/api/recommendations?limit=abc", headers=headers).status_code == 422


def test_high_threshold_returns_empty_list(client, seeker, make_job, auth_headers) -> None:
    _seed_jobs(make_job)
    r = client.get("/api/recommendations?min_score=90", headers=auth_headers(seeker))
    assert r.status_code == 200
    assert r.json() == {"data": [], "count": 0, "new_recommendations": 0}


def test_refresh_flag_recomputes(client, seeker, make_job, auth_headers) -> None:
    _seed_jobs(make_job)
    headers = auth_headers(seeker)
    first = client.get("/api/recommendations", headers=headers).json()
    refreshed = client.get("/api/recommendations?refresh=true", headers=headers).json()
    assert refreshed["new_recommendations"] == 2
    assert [d["job_id"] for d in refreshed["data"]] == [d["job_id"] for d in first["data"]]


def test_view_save_feedback_and_stats(client, db, seeker, make_job, auth_headers) -> None:
    _seed_jobs(make_job)
    headers = auth_headers(seeker)
    rec_id = client.get("/api/recommendations", headers=headers).json()["data"][0]["id"]

    detail = client.get(f"/api/recommendations/{rec_id}", headers=headers)
    assert detail.status_code == 200
    assert detail.json()["is_viewed"] is True

    saved = client.put(f"/api/recommendations/{rec_id}/save", json={"is_saved": True}, headers=headers)
    assert saved.status_code == 200
    assert saved.json()["is_saved"] is True

    saved_list = client.get("/api/recommendations/saved", headers=headers).json()
    assert [d["id"] for d in saved_list["data"]] == [rec_id]

    rejected = client.post(f"/api/recommendations/{rec_id}/feedback", json={"rating": 6}, headers=headers)
    assert rejected.status_code == 400
    db.expire_all()
    assert db.get(JobRecommendation, rec_id).feedback_rating is None

    accepted = client.post(f"/api/recommendations/{rec_id}/feedback", json={"rating": 4}, headers=headers)
    assert accepted.status_code == 200
    assert accepted.json()["feedback_rating"] == 4

    stats = client.get("/api/recommendations/stats", headers=headers)
    assert stats.status_code == 200
    assert stats.json() == {"total": 2, "viewed": 1, "saved": 1, "applied": 0, "average_score": 72}

    unsaved = client.put(f"/api/recommendations/{rec_id}/save", json={"is_saved": False}, headers=headers)
    assert unsaved.json()["is_saved"] is False
    assert client.get("/api/recommendations/saved", headers=headers).json()["count"] == 0


def test_mark_viewed_endpoint(client, seeker, make_job, auth_headers) -> None:
    _seed_jobs(make_job)
    headers = auth_headers(seeker)
    rec_id = client.get("/api/recommendations", headers=headers).json()["data"][1]["id"]
    r = client.put(f"/api/recommendations/{rec_id}/view", headers=headers)
    assert r.status_code == 200
    assert r.json()["is_viewed"] is True


def test_other_users_recommendation_is_not_found(client, seeker, make_user, make_job, auth_headers) -> None:
    _seed_jobs(make_job)
    rec_id = client.get("/api/recommendations", headers=auth_headers(seeker)).json()["data"][0]["id"]
    other = make_user(role="alumni")

    assert client.get(f"/api/recommendations/{rec_id}", headers=auth_headers(other)).status_code == 404
    assert client.get("/api/recommendations/999999", headers=auth_headers(seeker)).status_code == 404


def test_apply_marks_recommendation_applied(client, seeker, make_job, auth_headers) -> None:
    frontend, _ = _seed_jobs(make_job)
    headers = auth_headers(seeker)
    client.get("/api/recommendations", headers=headers)

    r = client.post("/api/applications", json={"job_id": frontend.id, "cover_letter": "Hi"}, headers=headers)
    assert r.status_code == 201
    assert r.json()["status"] == "pending"

    again = client.post("/api/applications", json={"job_id": frontend.id}, headers=headers)
    assert again.status_code == 409

    listed = client.get("/api/recommendations", headers=headers).json()
    assert frontend.id not in [d["job_id"] for d in listed["data"]]
    assert client.get("/api/recommendations/stats", headers=headers).json()["applied"] == 1


def test_profile_update_feeds_scoring(client, make_user, make_job, auth_headers) -> None:
    make_job(title="Data Analyst", skills=["sql", "excel"], location="Karachi", experience="entry level")
    user = make_user(role="alumni")
    headers = auth_headers(user)

    me = client.get("/api/users/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["skills"] == []

    r = client.put(
        "/api/users/me",
        json={"skills": [" SQL ", "Excel"], "location": "Karachi", "experience": "1 year"},
        headers=headers,
    )
    assert r.status_code == 200
    assert r.json()["skills"] == ["sql", "excel"]

    recs = client.get("/api/recommendations", headers=headers).json()
    assert recs["data"][0]["match_score"] == 93


def test_profile_update_rejects_inverted_salary(client, seeker, auth_headers) -> None:
    r = client.put(
        "/api/users/me",
        json={"expected_salary_min": 100_000, "expected_salary_max": 50_000},
        headers=auth_headers(seeker),
    )
    assert r.status_code == 422


def test_profile_update_rejects_partial_update_that_inverts_stored_range(client, seeker, auth_headers) -> None:
    headers = auth_headers(seeker)
    r = client.put("/api/users/me", json={"expected_salary_min": 200_000}, headers=headers)
    assert r.status_code == 400

    me = client.get("/api/users/me", headers=headers).json()
    assert me["expected_salary_min"] == 90_000
    assert me["expected_salary_max"] == 110_000


@pytest.mark.parametrize(
    "raw_skills, expected",
    [
        ("react, typescript", ["react", "typescript"]),
        (["react", 5], ["react", "5"]),
    ],
)
def test_jobs_with_loosely_typed_skills_still_render(client, seeker, make_job, auth_headers, raw_skills, expected) -> None:
    odd = make_job(title="Odd Skills", skills=raw_skills, location="Remote")
    make_job(title="Frontend Engineer", skills=["react"], location="Remote")
    headers = auth_headers(seeker)

    r = client.get("/api/recommendations", headers=headers)
    assert r.status_code == 200
    rendered = {item["job_id"]: item["job"]["skills"] for item in r.json()["data"]}
    assert rendered[odd.id] == expected

    again = client.get("/api/recommendations", headers=headers)
    assert again.status_code == 200
    assert again.json()["count"] == 2


def test_health(client) -> None:
    assert client.get("/health/").json()["status"] == "ok"
    assert client.get("/health/db").json()["orm"] == "ok"
