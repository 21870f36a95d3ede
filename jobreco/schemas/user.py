# user.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class UserRead(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    role: str
    skills: list[str] = Field(default_factory=list)
    location: Optional[str] = None
    experience: Optional[str] = None
    expected_salary_min: Optional[int] = None
    expected_salary_max: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("skills", mode="before")
    @classmethod
    def _coerce_null_skills(cls, v):
        if v is None:
            return []
        return v


class UserUpdate(BaseModel):
    name: Optional[str] = None
    skills: Optional[list[str]] = None
    location: Optional[str] = None
    experience: Optional[str] = None
    expected_salary_min: Optional[int] = Field(default=None, ge=0)
    expected_salary_max: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_salary_range(self) -> "UserUpdate":
        low, high = self.expected_salary_min, self.expected_salary_max
        if low is not None and high is not None and low > high:
            raise ValueError("expected_salary_min must not exceed expected_salary_max")
        return self


class TokenData(BaseModel):
    user_id: int
