"""Generic food scoring engine."""

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Any

from pydantic import ValidationError

from diet_planner.domain.errors import (
    MissingAttributesError,
    summarize_validation_error,
)
from diet_planner.domain.foods import FoodRecord
from diet_planner.domain.scoring import FoodExclusion, ScoredFood, ScoringRun
from diet_planner.frameworks.base import FrameworkRuleSet

_logger = logging.getLogger(__name__)


def evaluate_food(
    rule_set: FrameworkRuleSet, profile: Any, food: FoodRecord
) -> ScoredFood | FoodExclusion:
    """Score one food, or explain why the framework cannot score it."""
    try:
        attributes = rule_set.read_attributes(food)
    except MissingAttributesError as exc:
        return _exclusion(rule_set, food, str(exc))
    except ValidationError as exc:
        details = ", ".join(
            f"{error['field']} {error['message']}"
            for error in summarize_validation_error(exc)
        )
        reason = f"invalid {rule_set.attribute_key}: {details}"
        return _exclusion(rule_set, food, reason)

    breakdown: dict[str, float] = {}
    reasons: list[str] = []
    for component in rule_set.components:
        delta, notes = component.evaluate(profile, attributes, food)
        breakdown[component.name] = float(delta)
        reasons.extend(notes)
    total = sum(breakdown.values())
    if rule_set.score_precision is not None:
        total = round(total, rule_set.score_precision)
    return ScoredFood(
        food=food,
        attributes=attributes,
        score=total,
        breakdown=breakdown,
        reasons=tuple(reasons),
    )


def _exclusion(
    rule_set: FrameworkRuleSet, food: FoodRecord, reason: str
) -> FoodExclusion:
    return FoodExclusion(
        food_id=food.id, food_name=food.name, framework=rule_set.name, reason=reason
    )


@dataclass
class ScoringEngine:
    """Scores catalog foods against a profile for any framework.

    Foods are independent of each other, so catalogs may be scored on a
    thread pool; results always come back in catalog order.
    """

    max_workers: int = 1

    def score(
        self, rule_set: FrameworkRuleSet, profile: Any, food: FoodRecord
    ) -> ScoredFood | None:
        """Return the scored food, or None if the framework cannot score it."""
        result = evaluate_food(rule_set, profile, food)
        if isinstance(result, FoodExclusion):
            _logger.info(
                "Excluded %s from %s scoring: %s",
                food.name,
                rule_set.name,
                result.reason,
            )
            return None
        return result

    def score_catalog(
        self,
        rule_set: FrameworkRuleSet,
        profile: Any,
        foods: Sequence[FoodRecord],
    ) -> ScoringRun:
        """Score every food and collect the ones that had to be excluded."""
        evaluate = partial(evaluate_food, rule_set, profile)
        if self.max_workers > 1 and len(foods) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                results = list(pool.map(evaluate, foods))
        else:
            results = [evaluate(food) for food in foods]

        scored = tuple(item for item in results if isinstance(item, ScoredFood))
        exclusions = tuple(item for item in results if isinstance(item, FoodExclusion))
        for exclusion in exclusions:
            _logger.info(
                "Excluded %s from %s scoring: %s",
                exclusion.food_name,
                rule_set.name,
                exclusion.reason,
            )
        run = ScoringRun(framework=rule_set.name, scored=scored, exclusions=exclusions)
        _logger.info(
            "Scored %s of %s foods for %s",
            len(scored),
            len(foods),
            rule_set.name,
        )
        return run
