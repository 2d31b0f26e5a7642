"""Catalog rows from a JSON file."""

import json
from dataclasses import dataclass
from pathlib import Path

from diet_planner.services.catalog import FoodSource


@dataclass
class JsonFileFoodSource(FoodSource):
    """Reads catalog rows from a JSON list or a ``{"foods": [...]}`` document."""

    path: Path

    def fetch_foods(self) -> list[dict[str, object]]:
        data = json.loads(Path(self.path).read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("foods", [])
        if not isinstance(data, list):
            raise ValueError(f"Catalog file {self.path} must contain a list of foods")
        return [row for row in data if isinstance(row, dict)]
