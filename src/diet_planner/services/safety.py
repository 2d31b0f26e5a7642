"""Contraindication checks applied between scoring and tiering.

A blocked food never reaches the tiers, so it is neither recommended nor
planned. Cautions stay attached to the food and surface on its
recommendation.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from pydantic import ValidationError

from diet_planner.domain.attributes import ClinicalAttributes
from diet_planner.domain.foods import FoodRecord
from diet_planner.domain.safety import BlockedFood, SafetyVerdict
from diet_planner.domain.scoring import ScoredFood

_logger = logging.getLogger(__name__)

# Nutrient limits are per 100 g.
NET_CARB_LIMIT_G = 40.0
HIGH_GLYCEMIC_INDEX = 70.0
REFLUX_FAT_LIMIT_G = 25.0
SODIUM_LIMIT_MG = 920.0
SODIUM_CAUTION_MG = 400.0
KIDNEY_PROTEIN_LIMIT_G = 25.0
KIDNEY_PROTEIN_CAUTION_G = 15.0
POTASSIUM_LIMIT_MG = 1400.0

SafetyCheck = Callable[[FoodRecord, ClinicalAttributes | None], SafetyVerdict]


def normalize_condition(value: str) -> str:
    """Return names such as ``"Kidney Disease"`` as ``"kidney_disease"``."""
    return "_".join(value.replace("-", " ").lower().split())


def _verdict(blocks: list[str], cautions: list[str]) -> SafetyVerdict:
    return SafetyVerdict(
        blocked=bool(blocks),
        warnings=(
            *(f"Blocked: {message}" for message in blocks),
            *(f"Caution: {message}" for message in cautions),
        ),
    )


def _nutrients(food: FoodRecord) -> ClinicalAttributes | None:
    raw = food.attributes.get("clinical")
    if raw is None:
        return None
    try:
        return ClinicalAttributes.model_validate(raw)
    except ValidationError:
        return None


def _check_diabetes(
    food: FoodRecord, nutrients: ClinicalAttributes | None
) -> SafetyVerdict:
    blocks: list[str] = []
    cautions: list[str] = []
    if nutrients is not None:
        if nutrients.carbs - nutrients.fiber > NET_CARB_LIMIT_G:
            blocks.append("very high carbohydrate content unsuitable for diabetes")
        glycemic_index = nutrients.glycemic_index
        if glycemic_index is not None and glycemic_index >= HIGH_GLYCEMIC_INDEX:
            cautions.append("high glycemic index; pair with protein or fiber")
    if food.has_tag("high_sugar") or food.has_tag("sugary"):
        blocks.append("high sugar content")
    return _verdict(blocks, cautions)


def _check_acid_reflux(
    food: FoodRecord, nutrients: ClinicalAttributes | None
) -> SafetyVerdict:
    blocks: list[str] = []
    cautions: list[str] = []
    if nutrients is not None:
        if nutrients.fat > REFLUX_FAT_LIMIT_G:
            blocks.append("very high fat content triggers acid reflux")
        if nutrients.caffeine_mg > 0:
            cautions.append("caffeine can aggravate reflux")
    if food.has_tag("fried") or food.has_tag("deep_fried"):
        blocks.append("fried foods aggravate acid reflux")
    if food.category == "Spice" or food.has_tag("spicy"):
        blocks.append("spicy foods worsen acid reflux")
    return _verdict(blocks, cautions)


def _check_hypertension(
    food: FoodRecord, nutrients: ClinicalAttributes | None
) -> SafetyVerdict:
    blocks: list[str] = []
    cautions: list[str] = []
    sodium = nutrients.sodium_mg if nutrients is not None else 0.0
    if sodium > SODIUM_LIMIT_MG:
        blocks.append("very high sodium content not suitable for hypertension")
    elif sodium > SODIUM_CAUTION_MG:
        cautions.append("moderately high sodium; keep portions small")
    if food.has_tag("high_sodium"):
        blocks.append("high sodium content")
    return _verdict(blocks, cautions)


def _check_kidney(
    food: FoodRecord, nutrients: ClinicalAttributes | None
) -> SafetyVerdict:
    blocks: list[str] = []
    cautions: list[str] = []
    if nutrients is not None:
        if nutrients.protein > KIDNEY_PROTEIN_LIMIT_G:
            blocks.append("very high protein content may strain kidneys")
        elif nutrients.protein > KIDNEY_PROTEIN_CAUTION_G:
            cautions.append("moderate protein portions for kidney health")
        if nutrients.potassium_mg > POTASSIUM_LIMIT_MG:
            blocks.append("high potassium content not suitable for kidney disease")
    return _verdict(blocks, cautions)


def _check_vegan(
    food: FoodRecord, nutrients: ClinicalAttributes | None
) -> SafetyVerdict:
    if food.category in ("Meat", "Dairy") or food.has_tag("non_vegan"):
        return _verdict(["non-vegan food"], [])
    return SafetyVerdict()


def _check_halal(
    food: FoodRecord, nutrients: ClinicalAttributes | None
) -> SafetyVerdict:
    if food.has_tag("non_halal"):
        return _verdict(["non-halal food"], [])
    return SafetyVerdict()


_CHECKS: dict[str, SafetyCheck] = {
    "diabetes": _check_diabetes,
    "prediabetes": _check_diabetes,
    "acid_reflux": _check_acid_reflux,
    "gerd": _check_acid_reflux,
    "hypertension": _check_hypertension,
    "kidney_disease": _check_kidney,
    "vegan": _check_vegan,
    "halal": _check_halal,
}


def evaluate_safety(food: FoodRecord, conditions: Iterable[str]) -> SafetyVerdict:
    """Run every check that applies to the given conditions and restrictions.

    Unknown condition names are ignored. Nutrient limits need the food's
    clinical block; without it only the tag and category checks apply.
    """
    checks = dict.fromkeys(
        _CHECKS[key] for key in map(normalize_condition, conditions) if key in _CHECKS
    )
    verdict = SafetyVerdict()
    if not checks:
        return verdict
    nutrients = _nutrients(food)
    for check in checks:
        verdict = verdict.combine(check(food, nutrients))
    return verdict


@dataclass(frozen=True)
class SafetyScreen:
    """Scored foods split into admitted and blocked."""

    admitted: tuple[ScoredFood, ...]
    blocked: tuple[BlockedFood, ...] = ()
    warnings: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def warnings_for(self, food_id: str) -> tuple[str, ...]:
        return self.warnings.get(food_id, ())


def screen_foods(
    scored: Sequence[ScoredFood], conditions: Iterable[str]
) -> SafetyScreen:
    """Drop contraindicated foods, keeping catalog order for the rest."""
    conditions = tuple(conditions)
    if not conditions:
        return SafetyScreen(admitted=tuple(scored))
    admitted: list[ScoredFood] = []
    blocked: list[BlockedFood] = []
    warnings: dict[str, tuple[str, ...]] = {}
    for item in scored:
        verdict = evaluate_safety(item.food, conditions)
        if verdict.blocked:
            blocked.append(
                BlockedFood(
                    food_id=item.food.id,
                    name=item.food.name,
                    warnings=verdict.warnings,
                )
            )
            _logger.info("Blocked %s: %s", item.food.id, "; ".join(verdict.warnings))
            continue
        admitted.append(item)
        if verdict.warnings:
            warnings[item.food.id] = verdict.warnings
    return SafetyScreen(
        admitted=tuple(admitted), blocked=tuple(blocked), warnings=warnings
    )
