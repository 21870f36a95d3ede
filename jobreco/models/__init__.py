# __init__.py
from jobreco.models.application import Application
from jobreco.models.job_recommendation import JobRecommendation
from jobreco.models.jobs import Job
from jobreco.models.user import JOB_SEEKER_ROLES, User

__all__ = [
	"Application",
	"Job",
	"JobRecommendation",
	"JOB_SEEKER_ROLES",
	"User",
]
