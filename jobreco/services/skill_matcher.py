# skill_matcher.py
from typing import Iterable


def normalize_skill_name(value: str) -> str:
    return value.strip().lower()


def normalize_skills(values: Iterable[object] | None) -> list[str]:
    """Lower-case, strip and de-duplicate skills, keeping first-seen order."""
    if not values:
        return []
    result: list[str] = []
    seen: set[str] = set()
    for value in values:
        if value is None:
            continue
        if isinstance(value, dict):
            value = value.get("skill_name") or value.get("name") or ""
        normalized = normalize_skill_name(str(value))
        if normalized and normalized not in seen:
            seen.add(normalized)
            result.append(normalized)
    return result


def skills_match(user_skill: str, job_skill: str) -> bool:
    # Substring-tolerant in both directions: "react" ~ "react.js", "node.js" ~ "node".
    return user_skill == job_skill or job_skill in user_skill or user_skill in job_skill


def match_skills(user_skills: Iterable[object] | None, job_skills: Iterable[object] | None) -> tuple[list[str], list[str]]:
    """Split the job's required skills into (matched, missing) against the user's skills."""
    user_set = normalize_skills(user_skills)
    required = normalize_skills(job_skills)
    matched: list[str] = []
    missing: list[str] = []
    for job_skill in required:
        if any(skills_match(user_skill, job_skill) for user_skill in user_set):
            matched.append(job_skill)
        else:
            missing.append(job_skill)
    return matched, missing


def coerce_skill_list(value: object) -> list[str]:
    """Read a stored skills value as a list of display strings.

    Accepts a list (items are stringified, dicts read by ``skill_name``/``name``)
    or a comma separated string. Raises TypeError for any other shape.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"skills must be a list, got {type(value).__name__}")
    result: list[str] = []
    for item in value:
        if item is None:
            continue
        if isinstance(item, dict):
            item = item.get("skill_name") or item.get("name") or ""
        text = str(item).strip()
        if text:
            result.append(text)
    return result
