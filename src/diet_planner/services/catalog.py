"""Food catalog repository with an explicit load/reload lifecycle."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from pydantic import ValidationError

from diet_planner.domain.foods import FoodRecord

_logger = logging.getLogger(__name__)


class FoodSource(Protocol):
    """Interface for wherever catalog rows come from."""

    def fetch_foods(self) -> list[dict[str, object]]:
        """Return raw food rows."""


@dataclass
class CatalogRepository:
    """In-memory view of the food catalog.

    Rows are read from the source once on first use; ``reload`` replaces the
    snapshot. Readers always get an immutable tuple, so a reload never changes
    foods already handed out.
    """

    source: FoodSource
    _foods: tuple[FoodRecord, ...] | None = field(default=None, init=False)
    _index: dict[str, FoodRecord] = field(default_factory=dict, init=False)
    rejected_rows: int = field(default=0, init=False)

    @property
    def loaded(self) -> bool:
        return self._foods is not None

    def load(self) -> tuple[FoodRecord, ...]:
        """Load the catalog if it has not been loaded yet."""
        if self._foods is None:
            return self.reload()
        return self._foods

    def reload(self) -> tuple[FoodRecord, ...]:
        """Read the source again and replace the snapshot."""
        rows = self.source.fetch_foods()
        foods: list[FoodRecord] = []
        index: dict[str, FoodRecord] = {}
        rejected = 0
        for row in rows:
            try:
                food = FoodRecord.model_validate(row)
            except ValidationError as exc:
                rejected += 1
                _logger.warning(
                    "Skipping catalog row %s: %s",
                    row.get("id", "<no id>"),
                    exc.errors()[0]["msg"],
                )
                continue
            if food.id in index:
                rejected += 1
                _logger.warning("Skipping duplicate catalog id %s", food.id)
                continue
            index[food.id] = food
            foods.append(food)
        self._foods = tuple(foods)
        self._index = index
        self.rejected_rows = rejected
        _logger.info("Loaded %s foods (%s rows rejected)", len(foods), rejected)
        return self._foods

    def foods(self) -> tuple[FoodRecord, ...]:
        """Return every catalog food in insertion order."""
        return self.load()

    def get(self, food_id: str) -> FoodRecord | None:
        """Return a food by id."""
        self.load()
        return self._index.get(food_id)
