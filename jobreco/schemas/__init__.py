# __init__.py
from jobreco.schemas.application import ApplicationCreate, ApplicationRead
from jobreco.schemas.recommendation import (
	EmployerSummary,
	FeedbackRequest,
	JobSummary,
	MatchDetails,
	RecommendationListResponse,
	RecommendationRead,
	RecommendationStatsResponse,
	SaveRecommendationRequest,
)
from jobreco.schemas.user import TokenData, UserRead, UserUpdate

__all__ = [
	"ApplicationCreate",
	"ApplicationRead",
	"EmployerSummary",
	"FeedbackRequest",
	"JobSummary",
	"MatchDetails",
	"RecommendationListResponse",
	"RecommendationRead",
	"RecommendationStatsResponse",
	"SaveRecommendationRequest",
	"TokenData",
	"UserRead",
	"UserUpdate",
]
