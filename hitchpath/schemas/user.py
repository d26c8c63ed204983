"""Pydantic schemas for accounts and profiles."""
from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field, StringConstraints

from hitchpath.schemas.common import CamelSchema

LearningStyle = Literal["visual", "auditory", "reading", "kinesthetic"]
Pace = Literal["fast", "moderate", "slow"]
SkillLevel = Literal["beginner", "intermediate", "advanced"]


class RegisterRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class UserSummary(CamelSchema):
    id: int
    name: str
    email: str
    is_admin: bool = False


class AuthResponse(BaseModel):
    token: str
    user: UserSummary
    message: str | None = None


class LearningPreferences(BaseModel):
    """What the main-path prompt is built from."""

    career_path: str | None = None
    current_skill_level: SkillLevel = "beginner"
    preferred_learning_style: LearningStyle = "visual"


class ProfileUpdate(CamelSchema):
    """Writable profile fields; anything else in the body is ignored."""

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)] | None = None
    preferred_learning_style: LearningStyle | None = None
    pace_of_learning: Pace | None = None
    current_skill_level: SkillLevel | None = None
    career_path: str | None = Field(default=None, max_length=255)
    desired_skill: str | None = Field(default=None, max_length=255)
    primary_language: str | None = Field(default=None, max_length=64)
    short_term_goals: str | None = None
    long_term_goals: str | None = None


class UserProfile(CamelSchema):
    id: int
    name: str
    email: str
    is_admin: bool
    preferred_learning_style: str
    pace_of_learning: str
    current_skill_level: str
    career_path: str | None = None
    desired_skill: str | None = None
    primary_language: str | None = None
    short_term_goals: str | None = None
    long_term_goals: str | None = None
    has_main_path: bool
    specific_path_count: int
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user) -> "UserProfile":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            is_admin=bool(user.is_admin),
            preferred_learning_style=user.preferred_learning_style,
            pace_of_learning=user.pace_of_learning,
            current_skill_level=user.current_skill_level,
            career_path=user.career_path,
            desired_skill=user.desired_skill,
            primary_language=user.primary_language,
            short_term_goals=user.short_term_goals,
            long_term_goals=user.long_term_goals,
            has_main_path=user.has_main_path,
            specific_path_count=len(user.specific_paths or []),
            created_at=user.created_at,
        )


class ProfileResponse(BaseModel):
    user: UserProfile


class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserProfile


class ProfileCompletedResponse(BaseModel):
    completed: bool
