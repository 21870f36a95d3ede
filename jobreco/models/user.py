# user.py
from sqlalchemy import Column, DateTime, Integer, JSON, String
from sqlalchemy.sql import func
from jobreco.database import Base


JOB_SEEKER_ROLES = frozenset({"student", "alumni"})


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    # student | alumni | employer | admin
    role = Column(String(32), nullable=False, default="student", index=True)

    # Matching inputs. Everything is optional; missing values score as non-matching.
    skills = Column(JSON, nullable=True)
    location = Column(String(255), nullable=True)
    experience = Column(String(64), nullable=True)
    expected_salary_min = Column(Integer, nullable=True)
    expected_salary_max = Column(Integer, nullable=True)

    # Employers only.
    company = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
