"""Ranking and tiering of scored foods."""

from collections.abc import Iterable
from dataclasses import dataclass

from diet_planner.domain.scoring import ScoredFood, TieredCatalog
from diet_planner.frameworks.base import TieringPolicy

DEFAULT_LABELS = ("highly_recommended", "moderate", "avoid")


def rank(scored: Iterable[ScoredFood]) -> tuple[ScoredFood, ...]:
    """Sort by score, highest first, keeping catalog order for ties."""
    return tuple(sorted(scored, key=lambda item: item.score, reverse=True))


def tier(policy: TieringPolicy, scored: Iterable[ScoredFood]) -> TieredCatalog:
    """Rank scored foods and split them with the given policy."""
    return policy.split(rank(scored))


def _percent_of(count: int, percent: int, *, round_up: bool) -> int:
    if round_up:
        return -(-count * percent // 100)
    return count * percent // 100


@dataclass(frozen=True)
class PercentileTiering(TieringPolicy):
    """Top share highly recommended, bottom share avoided, the rest moderate.

    Cut points are computed from the number of foods that were scored, not the
    size of the catalog. The top cut always rounds up.
    """

    labels: tuple[str, str, str] = DEFAULT_LABELS
    top_percent: int = 30
    avoid_percent: int = 30
    round_avoid_up: bool = False
    planning_cap: int | None = None

    def split(self, ranked: tuple[ScoredFood, ...]) -> TieredCatalog:
        """Return tiers for foods already in rank order."""
        count = len(ranked)
        top = _percent_of(count, self.top_percent, round_up=True)
        avoided = _percent_of(count, self.avoid_percent, round_up=self.round_avoid_up)
        avoid_start = max(top, count - avoided)
        return TieredCatalog(
            labels=self.labels,
            highly_recommended=ranked[:top],
            moderate=ranked[top:avoid_start],
            avoid=ranked[avoid_start:],
            planning_cap=self.planning_cap,
        )


@dataclass(frozen=True)
class ThresholdTiering(TieringPolicy):
    """Fixed score thresholds: ``>= high`` and ``< low`` bound the middle tier."""

    labels: tuple[str, str, str] = DEFAULT_LABELS
    high: float = 10.0
    low: float = 0.0
    planning_cap: int | None = None

    def split(self, ranked: tuple[ScoredFood, ...]) -> TieredCatalog:
        """Return tiers for foods already in rank order."""
        return TieredCatalog(
            labels=self.labels,
            highly_recommended=tuple(
                item for item in ranked if item.score >= self.high
            ),
            moderate=tuple(
                item for item in ranked if self.low <= item.score < self.high
            ),
            avoid=tuple(item for item in ranked if item.score < self.low),
            planning_cap=self.planning_cap,
        )
