"""Tests for the recommendation and plan orchestration service."""

import asyncio

import pytest

from diet_planner.domain.errors import (
    FoodNotFoundError,
    ProfileValidationError,
    UnknownFrameworkError,
)
from diet_planner.domain.preferences import PlanPreferences
from diet_planner.services.planning import DietPlanService
from tests.conftest import InMemoryFoodSource, clinical, food_row


@pytest.fixture
def partial_rows(food_source: InMemoryFoodSource) -> InMemoryFoodSource:
    food_source.rows.extend(
        [
            food_row(
                "salt",
                "Sea Salt",
                "Spice",
                clinical=clinical(0, 0, 0, 0, sodium_mg=38000),
            ),
            food_row(
                "odd",
                "Odd Grain",
                "Grain",
                ayurveda={"doshaEffect": {"vata": "Decrease"}},
            ),
        ]
    )
    return food_source


def test_aliases_resolve_to_the_same_framework(
    diet_plan_service: DietPlanService, dosha_profile
) -> None:
    by_alias = diet_plan_service.tier_catalog("Ayurveda", dosha_profile)
    by_name = diet_plan_service.tier_catalog("dosha", dosha_profile)

    assert by_alias.rule_set is by_name.rule_set
    assert by_alias.tiered == by_name.tiered


def test_unknown_framework_is_rejected(
    diet_plan_service: DietPlanService, dosha_profile
) -> None:
    with pytest.raises(UnknownFrameworkError):
        diet_plan_service.recommend("astrology", dosha_profile)


def test_invalid_profile_is_rejected(diet_plan_service: DietPlanService) -> None:
    with pytest.raises(ProfileValidationError):
        diet_plan_service.recommend("dosha", {"dominant": "vata", "severity": 2})


def test_recommendations_carry_tier_labels(
    diet_plan_service: DietPlanService, temperament_profile
) -> None:
    items = diet_plan_service.recommend("unani", temperament_profile)

    assert len(items) == 16
    assert {item.tier for item in items} == {
        "highly_suitable",
        "moderately_suitable",
        "avoid",
    }
    assert all(item.final_score == item.score for item in items)


def test_frameworks_skip_foods_they_cannot_score(
    diet_plan_service: DietPlanService, partial_rows, dosha_profile, clinical_profile
) -> None:
    dosha = diet_plan_service.recommend("dosha", dosha_profile)
    clinical_items = diet_plan_service.recommend("clinical", clinical_profile)
    dosha_ids = {item.item_id for item in dosha}
    clinical_ids = {item.item_id for item in clinical_items}

    assert "salt" not in dosha_ids
    assert "odd" not in dosha_ids
    assert "salt" in clinical_ids


def test_score_food(
    diet_plan_service: DietPlanService, partial_rows, dosha_profile
) -> None:
    scored = diet_plan_service.score_food("dosha", dosha_profile, "rice")
    result = diet_plan_service.tier_catalog("dosha", dosha_profile)

    assert scored.item.food.id == "rice"
    assert scored.tier == result.tiered.tier_of("rice")
    assert scored.tier is not None
    assert not scored.blocked
    assert diet_plan_service.score_food("dosha", dosha_profile, "salt") is None
    with pytest.raises(FoodNotFoundError):
        diet_plan_service.score_food("dosha", dosha_profile, "caviar")


def test_generate_plan_reports_coverage(
    diet_plan_service: DietPlanService, partial_rows, dosha_profile, caplog
) -> None:
    with caplog.at_level("INFO"):
        result = asyncio.run(diet_plan_service.generate_plan("dosha", dosha_profile))

    assert result.framework == "dosha"
    assert len(result.plan.days) == 7
    assert {exclusion.food_id for exclusion in result.exclusions} == {"salt", "odd"}
    assert result.completeness == pytest.approx(16 / 18)
    assert result.reasoning.framework == "dosha"
    assert result.polished is None
    assert "Generated dosha plan" in caplog.text


def test_generate_plan_with_polish(
    diet_plan_service: DietPlanService, pattern_profile, polish_client
) -> None:
    result = asyncio.run(
        diet_plan_service.generate_plan(
            "tcm",
            pattern_profile,
            PlanPreferences(vegetarian_only=True),
            polish=True,
        )
    )

    assert result.polished.polished is True
    assert result.polished.text == "Polished explanation."
    assert len(polish_client.requests) == 1
    assert not any(
        food.category == "Meat" for meal in result.plan.meals() for food in meal.foods
    )


def test_catalog_report_counts_coverage(
    diet_plan_service: DietPlanService, partial_rows
) -> None:
    report = diet_plan_service.catalog_report()

    assert report["foods"] == 18
    assert report["rejected_rows"] == 0
    assert report["frameworks"]["dosha"] == {
        "scoreable": 16,
        "missing_attributes": 1,
        "invalid_attributes": 1,
        "completeness": 0.889,
    }
    assert report["frameworks"]["clinical"]["scoreable"] == 17
    assert report["frameworks"]["clinical"]["missing_attributes"] == 1
