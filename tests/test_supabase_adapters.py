"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from diet_planner.adapters.supabase_food_source import SupabaseFoodSource
from diet_planner.adapters.supabase_override_repository import (
    SupabaseOverrideRepository,
)
from diet_planner.services.overrides import OVERRIDE_EVENT
from tests.conftest import food_row


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None
    last_limit: int | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        self.last_filters = []
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def in_(self, column: str, values) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, tuple(values)))
        return self

    def limit(self, count: int) -> "FakeTable":
        self.last_limit = count
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _override_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": "evt-1",
        "user_id": "u1",
        "entity_type": "food",
        "entity_id": "rice",
        "event_type": OVERRIDE_EVENT,
        "before_json": {"score": 12},
        "after_json": {
            "action": "reject",
            "reason": "bloating",
            "new_score": -2,
            "applied_by": "dr-lee",
        },
        "created_at": "2026-03-01T10:00:00+00:00",
    }
    row.update(overrides)
    return row


def test_supabase_food_source_reads_ordered_rows() -> None:
    client = FakeSupabaseClient()
    table = client.table("catalog_foods")
    table.queue("select", [food_row("rice", "Rice", "Grain")])

    rows = SupabaseFoodSource(client, table="catalog_foods").fetch_foods()

    assert rows == [food_row("rice", "Rice", "Grain")]
    assert table.last_order == ("id", False)


def test_supabase_food_source_handles_empty_table() -> None:
    assert SupabaseFoodSource(FakeSupabaseClient()).fetch_foods() == []


def test_supabase_override_repository_create() -> None:
    client = FakeSupabaseClient()
    table = client.table("audit_events")
    table.queue("insert", [_override_row()])

    record = SupabaseOverrideRepository(client).create_override(
        user_id="u1",
        item_id="rice",
        action="reject",
        reason="bloating",
        new_score=-2,
        original_score=12,
        applied_by="dr-lee",
    )

    assert table.last_payload == {
        "user_id": "u1",
        "entity_type": "food",
        "entity_id": "rice",
        "event_type": OVERRIDE_EVENT,
        "before_json": {"score": 12},
        "after_json": {
            "action": "reject",
            "reason": "bloating",
            "new_score": -2,
            "applied_by": "dr-lee",
        },
    }
    assert record.id == "evt-1"
    assert record.new_score == -2.0
    assert record.original_score == 12.0
    assert record.created_at == datetime(2026, 3, 1, 10, tzinfo=UTC)


def test_supabase_override_repository_create_requires_row() -> None:
    repository = SupabaseOverrideRepository(FakeSupabaseClient())

    with pytest.raises(RuntimeError, match="Failed to record override"):
        repository.create_override(
            user_id="u1",
            item_id="rice",
            action="approve",
            reason="fine",
            new_score=None,
            original_score=None,
            applied_by=None,
        )


def test_supabase_override_repository_get_latest() -> None:
    client = FakeSupabaseClient()
    table = client.table("audit_events")
    table.queue("select", [_override_row(after_json={"action": "approve"})])

    repository = SupabaseOverrideRepository(client)
    record = repository.get_latest("u1", "rice")
    missing = repository.get_latest("u1", "oats")

    assert record.action == "approve"
    assert record.reason == ""
    assert record.new_score is None
    assert missing is None
    assert ("event_type", OVERRIDE_EVENT) in table.last_filters
    assert ("entity_id", "oats") in table.last_filters
    assert table.last_order == ("created_at", True)
    assert table.last_limit == 1


def test_supabase_override_repository_list_for_user() -> None:
    client = FakeSupabaseClient()
    table = client.table("overrides")
    table.queue(
        "select",
        [_override_row(id="evt-2", created_at=None), _override_row(id="evt-1")],
    )

    records = SupabaseOverrideRepository(client, table="overrides").list_for_user(
        "u1", limit=10
    )

    assert [record.id for record in records] == ["evt-2", "evt-1"]
    assert records[0].created_at is None
    assert table.last_limit == 10
    assert table.last_filters[0] == ("user_id", "u1")


def test_supabase_override_repository_get_latest_many() -> None:
    client = FakeSupabaseClient()
    table = client.table("audit_events")
    table.queue(
        "select",
        [
            _override_row(id="evt-3", entity_id="rice"),
            _override_row(id="evt-2", entity_id="oats"),
            _override_row(id="evt-1", entity_id="rice"),
        ],
    )

    latest = SupabaseOverrideRepository(client).get_latest_many(
        "u1", ["rice", "oats", "rice"]
    )

    assert {item_id: record.id for item_id, record in latest.items()} == {
        "rice": "evt-3",
        "oats": "evt-2",
    }
    assert ("entity_id", ("rice", "oats")) in table.last_filters
    assert table.last_order == ("created_at", True)


def test_supabase_override_repository_get_latest_many_skips_empty_ids() -> None:
    client = FakeSupabaseClient()

    assert SupabaseOverrideRepository(client).get_latest_many("u1", []) == {}
    assert client.tables == {}
