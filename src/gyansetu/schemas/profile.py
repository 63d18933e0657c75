"""Profile-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from gyansetu.core.policy import Role


class ProfileResponse(BaseModel):
    """Profile of the authenticated user."""

    id: int
    email: str
    display_name: str | None
    bio: str | None
    role: Role
    karma_points: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicProfile(BaseModel):
    """Profile as shown to other users."""

    id: int
    display_name: str | None
    bio: str | None
    role: Role
    karma_points: int
    badges: list[str] = Field(default_factory=list)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    display_name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=1000)


class RoleUpdate(BaseModel):
    role: Role


class LeaderboardEntry(BaseModel):
    rank: int
    id: int
    display_name: str | None
    karma_points: int
    badges: list[str] = Field(default_factory=list)


class KarmaLogResponse(BaseModel):
    """One entry of the karma ledger."""

    id: int
    change: int
    reason: str
    related_question_id: int | None
    related_answer_id: int | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
