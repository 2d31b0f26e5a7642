"""JSON views of engine results."""

from dataclasses import asdict

from diet_planner.domain.plans import Meal, WeeklyPlan
from diet_planner.domain.recommendations import OverrideRecord, Recommendation
from diet_planner.domain.scoring import ScoredFood, TieredCatalog
from diet_planner.services.planning import PlanResult


def serialize_recommendation(recommendation: Recommendation) -> dict[str, object]:
    return asdict(recommendation)


def serialize_scored(item: ScoredFood, tier: str | None = None) -> dict[str, object]:
    return {
        "item_id": item.food.id,
        "name": item.food.name,
        "category": item.food.category,
        "score": item.score,
        "tier": tier,
        "breakdown": dict(item.breakdown),
        "reasons": list(item.reasons),
    }


def serialize_tiers(tiered: TieredCatalog) -> dict[str, object]:
    return {
        label: [
            {"item_id": item.food.id, "name": item.food.name, "score": item.score}
            for item in items
        ]
        for label, items in tiered.tiers().items()
    }


def _serialize_meal(meal: Meal) -> dict[str, object]:
    return {
        "meal_type": meal.meal_type,
        "foods": [asdict(food) for food in meal.foods],
        "calorie_target": meal.calorie_target,
        "calories": meal.calories,
        "missing": list(meal.missing),
        "under_filled": meal.under_filled,
    }


def serialize_plan(plan: WeeklyPlan) -> dict[str, object]:
    """Return the week as nested days and meals."""
    return {
        "framework": plan.framework,
        "days": [
            {
                "day": day.day,
                "meals": [_serialize_meal(meal) for meal in day.meals],
                "guidelines": list(day.guidelines),
                "targets": asdict(day.targets) if day.targets else None,
            }
            for day in plan.days
        ],
        "shortfalls": [asdict(shortfall) for shortfall in plan.shortfalls],
    }


def serialize_plan_result(result: PlanResult) -> dict[str, object]:
    """Return a plan with its reasoning, tiers and catalog coverage."""
    payload: dict[str, object] = {
        "framework": result.framework,
        "plan": serialize_plan(result.plan),
        "reasoning": asdict(result.reasoning),
        "tiers": serialize_tiers(result.tiered),
        "exclusions": [asdict(exclusion) for exclusion in result.exclusions],
        "completeness": result.completeness,
        "blocked": [asdict(blocked) for blocked in result.blocked],
    }
    if result.polished is not None:
        payload["explanation"] = {
            "text": result.polished.text,
            "polished": result.polished.polished,
        }
    return payload


def serialize_override(record: OverrideRecord) -> dict[str, object]:
    return asdict(record)
