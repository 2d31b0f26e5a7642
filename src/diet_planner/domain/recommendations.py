"""Recommendations and practitioner overrides."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

OverrideAction = Literal["approve", "reject"]


@dataclass(frozen=True)
class Override:
    """A practitioner decision about a recommended item."""

    action: OverrideAction
    reason: str
    new_score: float | None = None
    applied_by: str | None = None
    applied_at: datetime | None = None


@dataclass(frozen=True)
class OverrideInfo:
    action: OverrideAction
    reason: str
    applied_by: str | None
    applied_at: datetime | None
    original_score: float


@dataclass(frozen=True)
class Recommendation:
    """A scored catalog item as returned to callers."""

    item_id: str
    name: str
    category: str
    tier: str
    score: float
    final_score: float
    breakdown: dict[str, float]
    reasons: tuple[str, ...]
    overridden: bool = False
    override_info: OverrideInfo | None = None
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class OverrideRecord:
    """A stored practitioner override."""

    id: str
    user_id: str
    item_id: str
    action: OverrideAction
    reason: str
    new_score: float | None
    original_score: float | None
    applied_by: str | None
    created_at: datetime | None

    def as_override(self) -> Override:
        """Return the override to apply to a fresh recommendation."""
        return Override(
            action=self.action,
            reason=self.reason,
            new_score=self.new_score,
            applied_by=self.applied_by,
            applied_at=self.created_at,
        )
