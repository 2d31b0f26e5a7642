"""Tests for ranking and tier splitting."""

import pytest

from diet_planner.domain.attributes import PatternAttributes
from diet_planner.domain.scoring import ScoredFood
from diet_planner.frameworks.clinical import CLINICAL_RULES
from diet_planner.frameworks.dosha import DOSHA_RULES
from diet_planner.frameworks.pattern import PATTERN_RULES
from diet_planner.frameworks.temperament import TEMPERAMENT_RULES
from diet_planner.services.tiering import rank, tier
from tests.conftest import make_food


def _scored(*scores: float) -> list[ScoredFood]:
    return [
        ScoredFood(
            food=make_food(f"food-{index}", f"Food {index}", "Grain"),
            attributes=PatternAttributes(),
            score=score,
            breakdown={},
            reasons=(),
        )
        for index, score in enumerate(scores)
    ]


def _sizes(tiered) -> tuple[int, int, int]:
    return (len(tiered.highly_recommended), len(tiered.moderate), len(tiered.avoid))


def test_rank_is_descending_and_stable_for_ties() -> None:
    items = _scored(1, 5, 5, 3, 5)

    ranked = rank(items)

    assert [item.food.id for item in ranked] == [
        "food-1",
        "food-2",
        "food-4",
        "food-3",
        "food-0",
    ]


@pytest.mark.parametrize("rule_set", [DOSHA_RULES, TEMPERAMENT_RULES, PATTERN_RULES])
def test_percentile_tiers_for_ten_foods(rule_set) -> None:
    tiered = tier(rule_set.tiering, _scored(*range(10, 0, -1)))

    assert _sizes(tiered) == (3, 4, 3)
    assert [item.score for item in tiered.highly_recommended] == [10, 9, 8]


def test_avoid_cut_rounding_differs_by_framework() -> None:
    scores = _scored(*range(7))

    assert _sizes(tier(DOSHA_RULES.tiering, scores)) == (3, 2, 2)
    assert _sizes(tier(TEMPERAMENT_RULES.tiering, scores)) == (3, 1, 3)


@pytest.mark.parametrize(("count", "expected"), [(0, (0, 0, 0)), (1, (1, 0, 0))])
def test_percentile_tiers_for_tiny_catalogs(
    count: int, expected: tuple[int, int, int]
) -> None:
    assert _sizes(tier(DOSHA_RULES.tiering, _scored(*range(count)))) == expected


def test_tier_labels_follow_framework() -> None:
    tiered = tier(TEMPERAMENT_RULES.tiering, _scored(3, 2, 1))

    assert list(tiered.tiers()) == [
        "highly_suitable",
        "moderately_suitable",
        "avoid",
    ]
    assert tiered.tier_of("food-0") == "highly_suitable"
    assert tiered.tier_of("food-2") == "avoid"
    assert tiered.tier_of("unknown") is None


def test_threshold_tiers_use_fixed_cut_points() -> None:
    tiered = tier(CLINICAL_RULES.tiering, _scored(0, 12, -0.1, 9.9, 10))

    assert [item.score for item in tiered.highly_recommended] == [12, 10]
    assert [item.score for item in tiered.moderate] == [9.9, 0]
    assert [item.score for item in tiered.avoid] == [-0.1]


def test_pattern_planning_pool_is_capped() -> None:
    tiered = tier(PATTERN_RULES.tiering, _scored(*range(80)))

    assert _sizes(tiered) == (24, 32, 24)
    assert len(tiered.pool(include_moderate=True)) == 50
    assert len(tiered.pool(include_moderate=False)) == 24


def test_filter_keeps_tier_membership() -> None:
    tiered = tier(DOSHA_RULES.tiering, _scored(*range(10)))

    kept = tiered.filter(lambda item: item.food.id != "food-9")

    assert len(kept) == 9
    assert kept.tier_of("food-9") is None
    assert kept.tier_of("food-8") == tiered.tier_of("food-8")
