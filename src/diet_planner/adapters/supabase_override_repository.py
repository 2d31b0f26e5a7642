"""Supabase repository for practitioner overrides."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from diet_planner.domain.recommendations import OverrideRecord
from diet_planner.services.overrides import OVERRIDE_EVENT, OverrideRepository

_ENTITY_TYPE = "food"


@dataclass
class SupabaseOverrideRepository(OverrideRepository):
    """Stores overrides as audit events."""

    client: Client
    table: str = "audit_events"

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
        """Insert an override event and return it."""
        response = (
            self.client.table(self.table)
            .insert(
                {
                    "user_id": user_id,
                    "entity_type": _ENTITY_TYPE,
                    "entity_id": item_id,
                    "event_type": OVERRIDE_EVENT,
                    "before_json": {"score": original_score},
                    "after_json": {
                        "action": action,
                        "reason": reason,
                        "new_score": new_score,
                        "applied_by": applied_by,
                    },
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to record override")
        return _parse_override(response.data[0])

    def get_latest(self, user_id: str, item_id: str) -> OverrideRecord | None:
        """Return the newest override for an item, if any."""
        response = (
            self._select(user_id)
            .eq("entity_id", item_id)
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_override(response.data[0])

    def get_latest_many(
        self, user_id: str, item_ids: Sequence[str]
    ) -> dict[str, OverrideRecord]:
        """Return the newest override per item in one query."""
        if not item_ids:
            return {}
        response = (
            self._select(user_id)
            .in_("entity_id", list(dict.fromkeys(item_ids)))
            .order("created_at", desc=True)
            .execute()
        )
        latest: dict[str, OverrideRecord] = {}
        for row in response.data or []:
            record = _parse_override(row)
            latest.setdefault(record.item_id, record)
        return latest

    def list_for_user(self, user_id: str, limit: int) -> list[OverrideRecord]:
        """Return a user's overrides, newest first."""
        response = (
            self._select(user_id).order("created_at", desc=True).limit(limit).execute()
        )
        return [_parse_override(row) for row in response.data or []]

    def _select(self, user_id: str):
        return (
            self.client.table(self.table)
            .select("*")
            .eq("user_id", user_id)
            .eq("entity_type", _ENTITY_TYPE)
            .eq("event_type", OVERRIDE_EVENT)
        )


def _parse_override(row: dict[str, object]) -> OverrideRecord:
    """Parse an audit event row into an override record."""
    before = row.get("before_json") or {}
    after = row.get("after_json") or {}
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    new_score = after.get("new_score")
    original_score = before.get("score")
    return OverrideRecord(
        id=str(row.get("id", "")),
        user_id=str(row.get("user_id", "")),
        item_id=str(row.get("entity_id", "")),
        action=str(after.get("action", "")),
        reason=str(after.get("reason", "")),
        new_score=float(new_score) if new_score is not None else None,
        original_score=float(original_score) if original_score is not None else None,
        applied_by=after.get("applied_by"),
        created_at=created_at,
    )
