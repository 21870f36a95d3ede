from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Sequence, TypeVar


T = TypeVar("T")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _as_aware(value: datetime | None) -> datetime:
    if value is None:
        return _OLDEST
    if value.tzinfo is None:
        # sqlite drops tzinfo; stored timestamps are UTC.
        return value.replace(tzinfo=timezone.utc)
    return value


def _job_id_key(item: Any) -> tuple[int, Any]:
    job_id = getattr(item, "job_id", None)
    # Keep ints before anything else so mixed ids still sort deterministically.
    if isinstance(job_id, int):
        return (0, job_id)
    return (1, str(job_id))


def rank_recommendations(items: Sequence[T], limit: int | None = None) -> list[T]:
    """Order by match score (desc), newer job posting first, then job id.

    Returns a new list truncated to ``limit``; ``items`` is left untouched.
    """
    ranked = sorted(items, key=_job_id_key)
    # Successive stable sorts: the last sort is the primary key.
    ranked.sort(key=lambda item: _as_aware(getattr(item, "job_created_at", None)), reverse=True)
    ranked.sort(key=lambda item: int(getattr(item, "match_score", 0) or 0), reverse=True)
    if limit is None:
        return ranked
    return ranked[: max(0, limit)]

