"""Generic weekly meal planner driven by framework meal templates."""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from diet_planner.domain.plans import (
    DailyTargets,
    DayPlan,
    Meal,
    PlannedFood,
    WeeklyPlan,
)
from diet_planner.domain.scoring import ScoredFood, TieredCatalog
from diet_planner.frameworks.base import FrameworkRuleSet, MealTemplate, SlotRule

_logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


def usage_key(name: str) -> str:
    """Return the key rotation caps and windows count a food under."""
    return " ".join(name.split()).casefold()


@dataclass
class PlanningContext:
    """Food usage for one weekly plan.

    A context is created by ``start_week`` and discarded once the week is
    built; nothing carries over between plans.
    """

    rotation_caps: Mapping[str, int]
    rotation_windows: Mapping[str, int]
    day: int = 0
    weekly_counts: dict[str, int] = field(default_factory=dict)
    window_usage: dict[str, set[str]] = field(default_factory=dict)
    window_index: dict[str, int] = field(default_factory=dict)

    @classmethod
    def start_week(cls, rule_set: FrameworkRuleSet) -> "PlanningContext":
        """Return a fresh context for a new week."""
        return cls(
            rotation_caps=dict(rule_set.rotation_caps),
            rotation_windows=dict(rule_set.rotation_windows),
        )

    def begin_day(self, day: int) -> None:
        """Advance to a day, clearing rotation windows that have elapsed."""
        self.day = day
        for window, length in self.rotation_windows.items():
            index = (day - 1) // length
            if self.window_index.get(window) != index:
                self.window_index[window] = index
                self.window_usage[window] = set()

    def uses(self, name: str) -> int:
        """Return how often a food name has been placed this week."""
        return self.weekly_counts.get(usage_key(name), 0)

    def allows(self, candidate: ScoredFood, window: str | None) -> bool:
        """Return True if rotation caps and windows permit the candidate."""
        cap = self.rotation_caps.get(candidate.food.category)
        key = usage_key(candidate.food.name)
        if cap is not None and self.weekly_counts.get(key, 0) >= cap:
            return False
        if window is not None and key in self.window_usage.get(window, set()):
            return False
        return True

    def record(self, candidate: ScoredFood, window: str | None) -> None:
        """Count a food placed in a meal."""
        key = usage_key(candidate.food.name)
        self.weekly_counts[key] = self.weekly_counts.get(key, 0) + 1
        if window is not None:
            self.window_usage.setdefault(window, set()).add(key)


@dataclass
class _MealDraft:
    template: MealTemplate
    budget: float | None
    chosen: list[ScoredFood] = field(default_factory=list)
    planned: list[PlannedFood] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    calories: float = 0.0

    def contains(self, candidate: ScoredFood) -> bool:
        key = usage_key(candidate.food.name)
        return any(usage_key(item.food.name) == key for item in self.chosen)


@dataclass
class WeeklyPlanner:
    """Builds a week of meals from a tiered catalog.

    Candidates are always tried in rank order. A candidate is skipped when a
    rotation cap or window excludes it, when it clashes with a food already in
    the meal, or when it would push the meal past its calorie allowance.
    """

    days: int = DAYS_PER_WEEK

    def plan(
        self, rule_set: FrameworkRuleSet, profile: Any, tiered: TieredCatalog
    ) -> WeeklyPlan:
        """Return a weekly plan for the profile."""
        context = PlanningContext.start_week(rule_set)
        targets = rule_set.daily_targets(profile) if rule_set.daily_targets else None
        guidelines = rule_set.day_guidelines(profile) if rule_set.day_guidelines else ()
        day_plans = []
        for day in range(1, self.days + 1):
            context.begin_day(day)
            meals = tuple(
                self._build_meal(rule_set, profile, tiered, template, context, targets)
                for template in rule_set.meals
            )
            day_plans.append(
                DayPlan(day=day, meals=meals, guidelines=guidelines, targets=targets)
            )
        plan = WeeklyPlan(framework=rule_set.name, days=tuple(day_plans))
        for shortfall in plan.shortfalls:
            _logger.info(
                "Under-filled %s on day %s for %s: missing %s",
                shortfall.meal_type,
                shortfall.day,
                rule_set.name,
                ", ".join(shortfall.roles),
            )
        return plan

    def _build_meal(  # noqa: PLR0913
        self,
        rule_set: FrameworkRuleSet,
        profile: Any,
        tiered: TieredCatalog,
        template: MealTemplate,
        context: PlanningContext,
        targets: DailyTargets | None,
    ) -> Meal:
        pool = tiered.pool(include_moderate=template.include_moderate)
        if template.admits is not None:
            pool = tuple(item for item in pool if template.admits(item))
        budget = None
        if targets is not None and template.calorie_share is not None:
            budget = round(targets.calories * template.calorie_share)
        draft = _MealDraft(template=template, budget=budget)

        for slot in template.slots:
            picked = 0
            for candidate in _candidates(slot, pool, profile, context.day):
                if picked == slot.count:
                    break
                calories = _slot_calories(rule_set, slot, candidate)
                if not self._fits(rule_set, draft, context, slot, candidate, calories):
                    continue
                context.record(candidate, slot.window)
                draft.chosen.append(candidate)
                draft.calories += calories or 0.0
                draft.planned.append(
                    PlannedFood(
                        food_id=candidate.food.id,
                        name=candidate.food.name,
                        category=candidate.food.category,
                        portion=slot.portion_for(profile),
                        preparation=slot.preparation_for(profile),
                        score=candidate.score,
                        calories=None if calories is None else round(calories, 1),
                    )
                )
                picked += 1
            if picked < slot.minimum:
                draft.missing.append(slot.role)

        return Meal(
            meal_type=template.meal_type,
            foods=tuple(draft.planned),
            calorie_target=budget,
            missing=tuple(draft.missing),
        )

    def _fits(  # noqa: PLR0913
        self,
        rule_set: FrameworkRuleSet,
        draft: _MealDraft,
        context: PlanningContext,
        slot: SlotRule,
        candidate: ScoredFood,
        calories: float | None,
    ) -> bool:
        if draft.contains(candidate):
            return False
        if not context.allows(candidate, slot.window):
            return False
        if rule_set.incompatible(candidate, draft.chosen) is not None:
            return False
        if draft.budget is not None and calories is not None:
            allowance = draft.budget * draft.template.calorie_tolerance
            if draft.calories + calories > allowance:
                return False
        return True


def _candidates(
    slot: SlotRule, pool: tuple[ScoredFood, ...], profile: Any, day: int
) -> Iterator[ScoredFood]:
    matches = [
        item
        for item in pool
        if item.food.category in slot.categories
        and (slot.eligible is None or slot.eligible(profile, item, day))
    ]
    if slot.prefer is not None:
        prefer = slot.prefer
        matches.sort(key=lambda item: not prefer(profile, item, day))
    yield from matches


def _slot_calories(
    rule_set: FrameworkRuleSet, slot: SlotRule, candidate: ScoredFood
) -> float | None:
    if rule_set.calories_of is None:
        return None
    return rule_set.calories_of(candidate) * slot.calorie_factor
