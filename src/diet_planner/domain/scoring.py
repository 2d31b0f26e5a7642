"""Scored foods and tiered catalogs."""

from collections.abc import Callable
from dataclasses import dataclass, field

from pydantic import BaseModel

from diet_planner.domain.foods import FoodRecord


@dataclass(frozen=True)
class ScoredFood:
    """A food scored against one profile. Never re-scored in place."""

    food: FoodRecord
    attributes: BaseModel
    score: float
    breakdown: dict[str, float]
    reasons: tuple[str, ...]


@dataclass(frozen=True)
class FoodExclusion:
    """A food left out of a framework because its attributes are unusable."""

    food_id: str
    food_name: str
    framework: str
    reason: str


@dataclass(frozen=True)
class ScoringRun:
    """Result of scoring a whole catalog for one framework."""

    framework: str
    scored: tuple[ScoredFood, ...]
    exclusions: tuple[FoodExclusion, ...]

    @property
    def completeness(self) -> float:
        """Share of catalog foods that could be scored."""
        total = len(self.scored) + len(self.exclusions)
        if total == 0:
            return 1.0
        return len(self.scored) / total


@dataclass(frozen=True)
class TieredCatalog:
    """Ranked foods split into three ordered tiers."""

    labels: tuple[str, str, str]
    highly_recommended: tuple[ScoredFood, ...]
    moderate: tuple[ScoredFood, ...]
    avoid: tuple[ScoredFood, ...]
    planning_cap: int | None = None
    _tier_index: dict[str, str] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        for label, items in zip(self.labels, self._groups(), strict=True):
            for item in items:
                self._tier_index[item.food.id] = label

    def _groups(self) -> tuple[tuple[ScoredFood, ...], ...]:
        return (self.highly_recommended, self.moderate, self.avoid)

    def ranked(self) -> tuple[ScoredFood, ...]:
        """Return every scored food in rank order."""
        return self.highly_recommended + self.moderate + self.avoid

    def tiers(self) -> dict[str, tuple[ScoredFood, ...]]:
        """Return tiers keyed by their framework label."""
        return dict(zip(self.labels, self._groups(), strict=True))

    def tier_of(self, food_id: str) -> str | None:
        """Return the tier label of a food, if it was scored."""
        return self._tier_index.get(food_id)

    def pool(self, *, include_moderate: bool) -> tuple[ScoredFood, ...]:
        """Return the foods meal planning may draw from."""
        foods = self.highly_recommended
        if include_moderate:
            foods = foods + self.moderate
        if self.planning_cap is not None:
            foods = foods[: self.planning_cap]
        return foods

    def filter(self, keep: Callable[[ScoredFood], bool]) -> "TieredCatalog":
        """Return a catalog without the foods rejected by ``keep``."""
        highly, moderate, avoid = (
            tuple(item for item in group if keep(item)) for group in self._groups()
        )
        return TieredCatalog(
            labels=self.labels,
            highly_recommended=highly,
            moderate=moderate,
            avoid=avoid,
            planning_cap=self.planning_cap,
        )

    def __len__(self) -> int:
        return len(self.highly_recommended) + len(self.moderate) + len(self.avoid)
