"""Recommendation and weekly plan orchestration."""

import logging
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from pydantic import ValidationError

from diet_planner.domain.errors import FoodNotFoundError, MissingAttributesError
from diet_planner.domain.foods import FoodRecord
from diet_planner.domain.plans import Reasoning, WeeklyPlan
from diet_planner.domain.preferences import PlanPreferences
from diet_planner.domain.recommendations import Recommendation
from diet_planner.domain.safety import BlockedFood
from diet_planner.domain.scoring import (
    FoodExclusion,
    ScoredFood,
    ScoringRun,
    TieredCatalog,
)
from diet_planner.frameworks.base import FrameworkRuleSet
from diet_planner.frameworks.registry import FrameworkRegistry
from diet_planner.services.catalog import CatalogRepository
from diet_planner.services.overrides import OverrideService
from diet_planner.services.planner import WeeklyPlanner
from diet_planner.services.polish import PolishedReasoning, ReasoningPolisher
from diet_planner.services.preferences import filter_catalog, select_recommendations
from diet_planner.services.reasoning import build_reasoning
from diet_planner.services.safety import SafetyScreen, screen_foods
from diet_planner.services.scoring import ScoringEngine
from diet_planner.services.tiering import tier

_logger = logging.getLogger(__name__)

RawProfile = Mapping[str, object]


@dataclass(frozen=True)
class TieringResult:
    rule_set: FrameworkRuleSet
    profile: Any
    run: ScoringRun
    screen: SafetyScreen
    tiered: TieredCatalog


@dataclass(frozen=True)
class PlanResult:
    """A weekly plan together with how it was derived."""

    framework: str
    plan: WeeklyPlan
    reasoning: Reasoning
    tiered: TieredCatalog
    exclusions: tuple[FoodExclusion, ...]
    completeness: float
    blocked: tuple[BlockedFood, ...] = ()
    polished: PolishedReasoning | None = None


@dataclass(frozen=True)
class FoodScore:
    """One food's score and where it lands among the framework's tiers.

    ``tier`` is None when a contraindication blocked the food.
    """

    item: ScoredFood
    tier: str | None
    blocked: bool = False
    warnings: tuple[str, ...] = ()


def to_recommendation(
    item: ScoredFood, tier_label: str, warnings: tuple[str, ...] = ()
) -> Recommendation:
    """Return the caller-facing view of a scored food."""
    return Recommendation(
        item_id=item.food.id,
        name=item.food.name,
        category=item.food.category,
        tier=tier_label,
        score=item.score,
        final_score=item.score,
        breakdown=dict(item.breakdown),
        reasons=item.reasons,
        warnings=warnings,
    )


@dataclass
class DietPlanService:
    """Runs profile -> scores -> tiers -> plan -> reasoning for any framework."""

    catalog: CatalogRepository
    registry: FrameworkRegistry
    scoring_engine: ScoringEngine
    planner: WeeklyPlanner
    override_service: OverrideService
    polisher: ReasoningPolisher

    def tier_catalog(
        self,
        framework: str,
        raw_profile: RawProfile,
        preferences: PlanPreferences | None = None,
    ) -> TieringResult:
        """Score, screen and tier the catalog, then apply preference filters.

        Contraindicated foods are removed before tiering, so percentile cut
        points only count foods that are safe for the user.
        """
        rule_set = self.registry.get(framework)
        profile = rule_set.parse_profile(raw_profile)
        result = self._screen_and_tier(rule_set, profile, _conditions(preferences))
        if preferences is None:
            return result
        return replace(result, tiered=filter_catalog(result.tiered, preferences))

    def _screen_and_tier(
        self, rule_set: FrameworkRuleSet, profile: Any, conditions: tuple[str, ...]
    ) -> TieringResult:
        run = self.scoring_engine.score_catalog(
            rule_set, profile, self.catalog.foods()
        )
        screen = screen_foods(run.scored, conditions)
        return TieringResult(
            rule_set=rule_set,
            profile=profile,
            run=run,
            screen=screen,
            tiered=tier(rule_set.tiering, screen.admitted),
        )

    def recommend(
        self,
        framework: str,
        raw_profile: RawProfile,
        preferences: PlanPreferences | None = None,
        user_id: str | None = None,
    ) -> list[Recommendation]:
        """Return ranked recommendations, applying stored overrides for a user."""
        resolved = preferences or PlanPreferences()
        result = self.tier_catalog(framework, raw_profile, resolved)
        selected = select_recommendations(result.tiered.ranked(), resolved)
        recommendations = [
            to_recommendation(
                item,
                result.tiered.tier_of(item.food.id) or "",
                result.screen.warnings_for(item.food.id),
            )
            for item in selected
        ]
        if user_id is not None:
            recommendations = self.override_service.apply_stored(
                user_id, recommendations
            )
        return recommendations

    def score_food(
        self,
        framework: str,
        raw_profile: RawProfile,
        food_id: str,
        preferences: PlanPreferences | None = None,
    ) -> FoodScore | None:
        """Score one catalog food and place it among the framework's tiers.

        Returns None if the framework cannot score the food. The tier is the
        one the food holds when the whole catalog is ranked; contraindications
        apply but preference filters do not.
        """
        rule_set = self.registry.get(framework)
        profile = rule_set.parse_profile(raw_profile)
        food = self.catalog.get(food_id)
        if food is None:
            raise FoodNotFoundError(food_id)
        item = self.scoring_engine.score(rule_set, profile, food)
        if item is None:
            return None
        result = self._screen_and_tier(rule_set, profile, _conditions(preferences))
        for blocked in result.screen.blocked:
            if blocked.food_id == food_id:
                return FoodScore(
                    item=item, tier=None, blocked=True, warnings=blocked.warnings
                )
        return FoodScore(
            item=item,
            tier=result.tiered.tier_of(food_id),
            warnings=result.screen.warnings_for(food_id),
        )

    async def generate_plan(
        self,
        framework: str,
        raw_profile: RawProfile,
        preferences: PlanPreferences | None = None,
        *,
        polish: bool = False,
    ) -> PlanResult:
        """Build a weekly plan and its reasoning."""
        result = self.tier_catalog(
            framework, raw_profile, preferences or PlanPreferences()
        )
        plan = self.planner.plan(result.rule_set, result.profile, result.tiered)
        reasoning = build_reasoning(result.rule_set, result.profile, result.tiered)
        polished = await self.polisher.polish(reasoning) if polish else None
        _logger.info(
            "Generated %s plan with %s under-filled meals",
            result.rule_set.name,
            len(plan.shortfalls),
        )
        return PlanResult(
            framework=result.rule_set.name,
            plan=plan,
            reasoning=reasoning,
            tiered=result.tiered,
            exclusions=result.run.exclusions,
            completeness=result.run.completeness,
            blocked=result.screen.blocked,
            polished=polished,
        )

    def catalog_report(self) -> dict[str, object]:
        """Summarize how much of the catalog each framework can score."""
        foods = self.catalog.foods()
        frameworks: dict[str, dict[str, object]] = {}
        for rule_set in self.registry:
            counts = Counter(_block_status(rule_set, food) for food in foods)
            frameworks[rule_set.name] = {
                "scoreable": counts["scoreable"],
                "missing_attributes": counts["missing"],
                "invalid_attributes": counts["invalid"],
                "completeness": (
                    round(counts["scoreable"] / len(foods), 3) if foods else 1.0
                ),
            }
        return {
            "foods": len(foods),
            "rejected_rows": self.catalog.rejected_rows,
            "frameworks": frameworks,
        }


def _conditions(preferences: PlanPreferences | None) -> tuple[str, ...]:
    if preferences is None:
        return ()
    return (*preferences.medical_conditions, *preferences.dietary_restrictions)


def _block_status(rule_set: FrameworkRuleSet, food: FoodRecord) -> str:
    try:
        rule_set.read_attributes(food)
    except MissingAttributesError:
        return "missing"
    except ValidationError:
        return "invalid"
    return "scoreable"
