"""Request bodies for the HTTP API."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from diet_planner.domain.preferences import PlanPreferences


class ProfileRequest(BaseModel):
    profile: dict[str, Any]


class ScoreRequest(ProfileRequest):
    """Profile plus the conditions used to screen the catalog."""

    preferences: PlanPreferences | None = None


class RecommendationRequest(ProfileRequest):
    """Profile plus optional filters and the user whose overrides apply."""

    preferences: PlanPreferences | None = None
    user_id: str | None = None


class PlanRequest(ProfileRequest):
    preferences: PlanPreferences | None = None
    polish: bool = False


class OverrideRequest(BaseModel):
    """A practitioner decision to record."""

    user_id: str = Field(min_length=1)
    item_id: str = Field(min_length=1)
    action: Literal["approve", "reject"]
    reason: str = Field(min_length=1)
    new_score: float | None = None
    original_score: float | None = None
    applied_by: str | None = None
