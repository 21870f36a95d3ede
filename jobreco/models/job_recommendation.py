from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, JSON, UniqueConstraint
from sqlalchemy.sql import func

from jobreco.database import Base


class JobRecommendation(Base):
    __tablename__ = "job_recommendations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)

    match_score = Column(Integer, nullable=False)
    # Stored as MatchBreakdown fields (see services/match_score_service.py)
    match_details = Column(JSON, nullable=False, default=dict)

    is_viewed = Column(Boolean, nullable=False, default=False)
    is_saved = Column(Boolean, nullable=False, default=False)
    is_applied = Column(Boolean, nullable=False, default=False)
    feedback_rating = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "job_id", name="uq_job_recommendations_user_job"),
        Index("ix_job_recommendations_user_score", "user_id", "match_score"),
    )
