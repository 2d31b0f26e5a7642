"""Practitioner overrides of engine scores."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Protocol

from diet_planner.domain.recommendations import (
    Override,
    OverrideInfo,
    OverrideRecord,
    Recommendation,
)

_logger = logging.getLogger(__name__)

OVERRIDE_EVENT = "PRACTITIONER_OVERRIDE"
OVERRIDE_ACTIONS = ("approve", "reject")
DEFAULT_OVERRIDE_LIMIT = 50


def apply_override(
    recommendation: Recommendation, override: Override
) -> Recommendation:
    """Return a copy of the recommendation with the override applied.

    The original recommendation is left untouched so its engine score stays
    available for audit.
    """
    final_score = recommendation.final_score
    if override.new_score is not None:
        final_score = override.new_score
    return replace(
        recommendation,
        final_score=final_score,
        overridden=True,
        override_info=OverrideInfo(
            action=override.action,
            reason=override.reason,
            applied_by=override.applied_by,
            applied_at=override.applied_at,
            original_score=recommendation.score,
        ),
        reasons=(*recommendation.reasons, f"Practitioner override: {override.reason}"),
    )


class OverrideRepository(Protocol):
    """Persistence interface for practitioner overrides."""

    def create_override(  # noqa: PLR0913
        self,
        user_id: str,
        item_id: str,
        action: str,
        reason: str,
        new_score: float | None,
        original_score: float | None,
        applied_by: str | None,
    ) -> OverrideRecord:
        """Store an override and return the stored record."""

    def get_latest(self, user_id: str, item_id: str) -> OverrideRecord | None:
        """Return the most recent override for a user and item."""

    def get_latest_many(
        self, user_id: str, item_ids: Sequence[str]
    ) -> dict[str, OverrideRecord]:
        """Return the most recent override per item, keyed by item id."""

    def list_for_user(self, user_id: str, limit: int) -> list[OverrideRecord]:
        """Return a user's overrides, newest first."""


@dataclass
class OverrideService:
    """Records overrides and applies stored ones to fresh recommendations."""

    repository: OverrideRepository

    def create_override(  # noqa: PLR0913
        self,
        *,
        user_id: str,
        item_id: str,
        action: str,
        reason: str,
        new_score: float | None = None,
        original_score: float | None = None,
        applied_by: str | None = None,
    ) -> OverrideRecord:
        """Validate and store an override."""
        if action not in OVERRIDE_ACTIONS:
            raise ValueError(f"Unsupported override action: {action}")
        if not reason.strip():
            raise ValueError("Override reason is required")
        record = self.repository.create_override(
            user_id=user_id,
            item_id=item_id,
            action=action,
            reason=reason.strip(),
            new_score=new_score,
            original_score=original_score,
            applied_by=applied_by,
        )
        _logger.info(
            "Recorded %s override for user %s item %s", action, user_id, item_id
        )
        return record

    def get_override(self, user_id: str, item_id: str) -> OverrideRecord | None:
        """Return the latest override for a user and item."""
        return self.repository.get_latest(user_id, item_id)

    def list_user_overrides(
        self, user_id: str, limit: int = DEFAULT_OVERRIDE_LIMIT
    ) -> list[OverrideRecord]:
        """Return a user's overrides, newest first."""
        return self.repository.list_for_user(user_id, limit)

    def apply_stored(
        self, user_id: str, recommendations: list[Recommendation]
    ) -> list[Recommendation]:
        """Apply each item's latest stored override, if any.

        Overrides for all items are fetched with a single repository call.
        """
        latest = self.repository.get_latest_many(
            user_id, [recommendation.item_id for recommendation in recommendations]
        )
        applied = []
        for recommendation in recommendations:
            record = latest.get(recommendation.item_id)
            if record is None:
                applied.append(recommendation)
            else:
                applied.append(apply_override(recommendation, record.as_override()))
        return applied
