from __future__ import annotations

import logging

import pytest

from jobreco.services.errors import ScoringError
from jobreco.services.match_score_service import (
    JobPosting,
    UserProfile,
    parse_experience_years,
    score,
)


def _scenario_user(**overrides) -> UserProfile:
    fields = dict(
        user_id=1,
        role="student",
        skills=("React", "Node"),
        location="Remote",
        experience="3 years",
        salary_min=90_000,
        salary_max=110_000,
    )
    fields.update(overrides)
    return UserProfile(**fields)


def _scenario_job(**overrides) -> JobPosting:
    fields = dict(
        job_id=10,
        skills=("react", "typescript"),
        location="Remote",
        experience="2-4 years",
        salary_min=80_000,
        salary_max=120_000,
    )
    fields.update(overrides)
    return JobPosting(**fields)


def test_reference_scenario_breakdown() -> None:
    result = score(_scenario_user(), _scenario_job())

    assert result.details.skill_score == 25.0
    assert result.details.location_score == 20.0
    assert result.details.experience_score == 15.0
    assert result.details.salary_score == 15.0
    assert result.details.matched_skills == ["react"]
    assert result.details.missing_skills == ["typescript"]
    assert result.details.total_skills == 2
    assert result.details.salary_overlap is True
    assert result.score == 75
    assert 75 <= result.score <= 90


def test_score_is_deterministic() -> None:
    first = score(_scenario_user(), _scenario_job())
    second = score(_scenario_user(), _scenario_job())
    assert first == second


def test_perfect_match_scores_100() -> None:
    job = _scenario_job(skills=("react", "node"))
    assert score(_scenario_user(), job).score == 100


@pytest.mark.parametrize(
    "user, job",
    [
        (UserProfile(user_id=1), JobPosting(job_id=1)),
        (_scenario_user(), _scenario_job()),
        (_scenario_user(skills=()), _scenario_job(skills=())),
        (_scenario_user(experience="0 years"), _scenario_job(experience="10 years", salary_min=1, salary_max=2)),
        (_scenario_user(location="Berlin"), _scenario_job(location="Tokyo")),
    ],
)
def test_score_is_bounded(user: UserProfile, job: JobPosting) -> None:
    result = score(user, job)
    assert 0 <= result.score <= 100


def test_adding_matching_skill_never_lowers_skill_score() -> None:
    job = _scenario_job(skills=("react", "typescript", "node"))
    before = score(_scenario_user(skills=("react",)), job).details.skill_score
    after = score(_scenario_user(skills=("react", "node")), job).details.skill_score
    assert after > before


def test_skill_matching_is_case_insensitive_and_substring_tolerant() -> None:
    user = _scenario_user(skills=("React.js", "NODE"))
    job = _scenario_job(skills=("react", "node.js"))
    result = score(user, job)
    assert result.details.matched_skills == ["react", "node.js"]
    assert result.details.skill_score == 50.0


def test_empty_skills_on_either_side_score_zero() -> None:
    assert score(_scenario_user(skills=()), _scenario_job()).details.skill_score == 0.0
    assert score(_scenario_user(), _scenario_job(skills=())).details.skill_score == 0.0


def test_location_mismatch_is_zero_not_a_penalty() -> None:
    result = score(_scenario_user(location="Lahore"), _scenario_job(location="Berlin"))
    assert result.details.location_score == 0.0
    assert result.details.location_matched is False


def test_location_substring_and_remote_jobs_match() -> None:
    assert score(_scenario_user(location="Lahore"), _scenario_job(location="Lahore, Pakistan")).details.location_matched
    assert score(_scenario_user(location="Karachi"), _scenario_job(location="Remote (PK)")).details.location_matched


def test_missing_location_counts_as_non_matching() -> None:
    assert score(_scenario_user(location=None), _scenario_job()).details.location_score == 0.0


@pytest.mark.parametrize(
    "user_experience, expected",
    [
        ("5 years", 15.0),
        ("2 years", 15.0),
        ("1.5 years", 12.0),
        ("1 year", 9.0),
        ("0 years", 6.0),
    ],
)
def test_experience_partial_credit(user_experience: str, expected: float) -> None:
    result = score(_scenario_user(experience=user_experience), _scenario_job(experience="2 years"))
    assert result.details.experience_score == expected


def test_entry_level_job_gives_full_experience_credit() -> None:
    result = score(_scenario_user(experience="0 years"), _scenario_job(experience="Entry level"))
    assert result.details.required_experience_years == 0.0
    assert result.details.experience_score == 15.0


def test_unparseable_experience_is_neutral_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="jobreco.services.match_score_service"):
        result = score(_scenario_user(), _scenario_job(experience="senior"))
    assert result.details.experience_score == 7.5
    assert result.details.required_experience_years is None
    assert any("Unparseable experience" in record.getMessage() for record in caplog.records)


def test_missing_salary_on_either_side_is_neutral() -> None:
    no_user_salary = score(_scenario_user(salary_min=None, salary_max=None), _scenario_job())
    no_job_salary = score(_scenario_user(), _scenario_job(salary_min=None, salary_max=None))
    assert no_user_salary.details.salary_score == 7.5
    assert no_user_salary.details.salary_overlap is None
    assert no_job_salary.details.salary_score == 7.5


def test_disjoint_salary_ranges_score_zero() -> None:
    result = score(_scenario_user(), _scenario_job(salary_min=20_000, salary_max=30_000))
    assert result.details.salary_score == 0.0
    assert result.details.salary_overlap is False


def test_open_ended_salary_range_overlaps() -> None:
    result = score(_scenario_user(salary_max=None), _scenario_job(salary_min=None, salary_max=95_000))
    assert result.details.salary_overlap is True


def test_bare_profiles_get_only_neutral_credit() -> None:
    result = score(UserProfile(user_id=1), JobPosting(job_id=2))
    assert result.score == 15
    assert result.details.skill_score == 0.0
    assert result.details.location_score == 0.0


def test_non_numeric_salary_raises_scoring_error() -> None:
    with pytest.raises(ScoringError):
        score(_scenario_user(), _scenario_job(salary_min="lots"))


@pytest.mark.parametrize(
    "text, expected",
    [
        ("3 years", 3.0),
        ("2-4 years", 2.0),
        ("5+ yrs", 5.0),
        ("Fresher", 0.0),
        ("", None),
        (None, None),
    ],
)
def test_parse_experience_years(text, expected) -> None:
    assert parse_experience_years(text) == expected


@pytest.mark.parametrize("text", ["Working since 2018", "Graduated in 2019"])
def test_calendar_years_are_not_read_as_experience(text, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="jobreco.services.match_score_service"):
        assert parse_experience_years(text) is None
    assert any("Unparseable experience" in record.getMessage() for record in caplog.records)


def test_duration_is_found_after_a_calendar_year() -> None:
    assert parse_experience_years("Since 2020, about 4 years") == 4.0
