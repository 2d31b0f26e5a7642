"""Traditional Chinese medicine pattern rules."""

from diet_planner.domain.attributes import PatternAttributes
from diet_planner.domain.foods import FoodRecord
from diet_planner.domain.plans import Narrative
from diet_planner.domain.profiles import PatternProfile
from diet_planner.domain.scoring import ScoredFood
from diet_planner.frameworks.base import (
    FrameworkRuleSet,
    IncompatiblePair,
    MealTemplate,
    ScoringComponent,
    SlotRule,
    in_category,
)
from diet_planner.services.tiering import PercentileTiering

PLANNING_POOL_SIZE = 50

# Attribute flag that corrects each pattern.
PATTERN_AFFINITY = {
    "Qi Deficiency": "tonifies_qi",
    "Qi Excess": "moves_qi",
    "Yin Deficiency": "nourishes_yin",
    "Dryness": "nourishes_yin",
    "Yang Deficiency": "warms_yang",
    "Liver Qi Stagnation": "moves_qi",
    "Dampness": "resolves_dampness",
    "Heat Pattern": "clears_heat",
    "Liver Heat": "clears_heat",
}

_HEAT_PATTERNS = ("Heat Pattern", "Liver Heat")

_STRATEGIES = {
    "Cold Pattern": "warm the interior with hot and warm-natured foods",
    "Heat Pattern": "clear heat with cooling foods",
    "Liver Heat": "clear liver heat with cooling, bitter foods",
    "Qi Deficiency": "tonify Qi with strengthening grains and proteins",
    "Qi Excess": "move and regulate Qi with lighter foods",
    "Dampness": "resolve dampness with drying and diuretic foods",
    "Dryness": "moisten with Yin-nourishing foods",
    "Liver Qi Stagnation": "move Qi with aromatic and pungent foods",
    "Yin Deficiency": "nourish Yin with cooling and moistening foods",
    "Yang Deficiency": "warm Yang with heating and energizing foods",
}

_PATTERN_SUPPORT = {
    "Qi Deficiency": (
        "Qi-tonifying foods included throughout the day, especially at breakfast "
        "and lunch"
    ),
    "Yin Deficiency": "Yin-nourishing foods emphasized to restore fluids",
    "Yang Deficiency": "Yang-warming foods prioritized to restore warmth",
    "Dampness": (
        "Dampness-resolving foods emphasized, avoiding damp-forming sweet and heavy "
        "foods"
    ),
    "Heat Pattern": "Heat-clearing foods with cooling thermal nature prioritized",
    "Liver Qi Stagnation": "Qi-moving foods included to promote smooth flow",
}

_THERMAL_NOTES = {
    "Cold": (
        "Emphasizing warm and hot foods to balance cold tendency; avoiding cold and "
        "raw foods at breakfast"
    ),
    "Heat": "Emphasizing cool and cold foods to balance heat tendency",
    "Balanced": "Balanced approach with neutral thermal foods",
}

_SEVERITY_LABELS = {1: "mild", 2: "moderate", 3: "strong"}


def _has_affinity(pattern: str | None, attributes: PatternAttributes) -> bool:
    flag = PATTERN_AFFINITY.get(pattern or "")
    return flag is not None and bool(getattr(attributes, flag))


def _primary_pattern(
    profile: PatternProfile, attributes: PatternAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    pattern = profile.dominant
    weight = profile.severity
    delta = 0
    reasons = []
    if _has_affinity(pattern, attributes):
        delta += 4 * weight
        reasons.append(f"Corrects {pattern} (+{4 * weight})")
    if pattern == "Dampness" and not attributes.is_light:
        delta -= 3 * weight
        reasons.append(f"Sweet and damp-forming aggravates Dampness (-{3 * weight})")
    if pattern in _HEAT_PATTERNS and attributes.thermal_nature == "Hot":
        delta -= 3 * weight
        reasons.append(f"Hot nature aggravates {pattern} (-{3 * weight})")
    if pattern == "Cold Pattern":
        if attributes.is_warming:
            delta += 3 * weight
            reasons.append(f"Warming nature corrects Cold Pattern (+{3 * weight})")
        elif attributes.thermal_nature == "Cold":
            delta -= 3 * weight
            reasons.append(f"Cold nature aggravates Cold Pattern (-{3 * weight})")
    return delta, reasons


def _secondary_pattern(
    profile: PatternProfile, attributes: PatternAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    if profile.secondary is None:
        return 0, []
    if _has_affinity(profile.secondary, attributes):
        return 2, [f"Supports secondary {profile.secondary} (+2)"]
    if profile.secondary == "Cold Pattern" and attributes.is_warming:
        return 2, ["Warms secondary Cold Pattern (+2)"]
    return 0, []


def _thermal_balance(
    profile: PatternProfile, attributes: PatternAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    nature = attributes.thermal_nature
    if profile.cold_heat == "Cold":
        if attributes.is_warming:
            return 2, [f"{nature} nature balances cold tendency (+2)"]
        if nature == "Cold":
            return -2, ["Cold nature deepens cold tendency (-2)"]
    elif profile.cold_heat == "Heat":
        if attributes.is_cooling:
            return 2, [f"{nature} nature balances heat tendency (+2)"]
        if nature == "Hot":
            return -2, ["Hot nature deepens heat tendency (-2)"]
    return 0, []


def _not_cold(item: ScoredFood) -> bool:
    return item.attributes.thermal_nature != "Cold"


def _not_damp_forming(item: ScoredFood) -> bool:
    return not item.attributes.damp_forming


def _warming_breakfast(profile: PatternProfile, item: ScoredFood, day: int) -> bool:
    return _not_cold(item)


def _qi_tonic(profile: PatternProfile, item: ScoredFood, day: int) -> bool:
    needs_tonic = profile.dominant == "Qi Deficiency" or profile.cold_heat == "Cold"
    return needs_tonic and item.attributes.tonifies_qi and _not_cold(item)


def _resolves_dampness(profile: PatternProfile, item: ScoredFood, day: int) -> bool:
    return profile.dominant == "Dampness" and item.attributes.resolves_dampness


def _cooling_for_heat(profile: PatternProfile, item: ScoredFood, day: int) -> bool:
    runs_hot = profile.dominant in _HEAT_PATTERNS or profile.cold_heat == "Heat"
    return runs_hot and item.attributes.is_cooling


def _qi_mover(profile: PatternProfile, item: ScoredFood, day: int) -> bool:
    return profile.dominant == "Liver Qi Stagnation" and item.attributes.moves_qi


def _light_dinner(profile: PatternProfile, item: ScoredFood, day: int) -> bool:
    return item.attributes.is_light


def _light_protein(profile: PatternProfile, item: ScoredFood, day: int) -> bool:
    return profile.dominant == "Qi Deficiency" and item.attributes.is_light


def _warming_spice(profile: PatternProfile, item: ScoredFood, day: int) -> bool:
    return item.attributes.is_warming


def _narrate(profile: PatternProfile) -> Narrative:
    pattern = profile.dominant
    strategy = _STRATEGIES.get(pattern, "achieve balance")
    principles = [
        f"Foods selected to {strategy}",
        f"Thermal balance: {_THERMAL_NOTES[profile.cold_heat]}",
        "Avoid damp-forming and heavy foods at night",
    ]
    if pattern in _PATTERN_SUPPORT:
        principles.append(_PATTERN_SUPPORT[pattern])
    if profile.secondary:
        principles.append(f"Secondary support for {profile.secondary}")
    return Narrative(
        summary=(
            f"Pattern: {pattern} ({_SEVERITY_LABELS[profile.severity]} severity), "
            f"{profile.cold_heat.lower()} tendency"
        ),
        primary_goal=f"Correct {pattern}: {strategy}",
        meal_timing=(
            "Lighter meals in the evening to support digestion and avoid accumulation"
        ),
        principles=tuple(principles),
    )


PATTERN_RULES = FrameworkRuleSet(
    name="pattern",
    display_name="Traditional Chinese Medicine",
    attribute_key="tcm",
    profile_model=PatternProfile,
    attribute_model=PatternAttributes,
    components=(
        ScoringComponent("primary_pattern", _primary_pattern),
        ScoringComponent("secondary_pattern", _secondary_pattern),
        ScoringComponent("thermal_balance", _thermal_balance),
    ),
    tiering=PercentileTiering(
        labels=("recommended", "moderate", "avoid"),
        planning_cap=PLANNING_POOL_SIZE,
    ),
    meals=(
        MealTemplate(
            meal_type="Breakfast",
            slots=(
                SlotRule(
                    role="grain",
                    categories=("Grain",),
                    portion="Medium",
                    preparation="Warm porridge or cooked",
                    eligible=_warming_breakfast,
                    window="breakfast",
                ),
                SlotRule(
                    role="qi_tonic",
                    categories=("Grain", "Legume", "Meat"),
                    minimum=0,
                    portion="Small",
                    preparation="Cooked, warm",
                    eligible=_qi_tonic,
                    window="protein",
                ),
                SlotRule(
                    role="beverage",
                    categories=("Beverage",),
                    minimum=0,
                    portion="1 cup",
                    preparation="Warm",
                    eligible=_warming_breakfast,
                ),
            ),
        ),
        MealTemplate(
            meal_type="Lunch",
            slots=(
                SlotRule(
                    role="grain",
                    categories=("Grain",),
                    portion="Large",
                    preparation="Cooked",
                    window="grain",
                ),
                SlotRule(
                    role="protein",
                    categories=("Legume", "Meat"),
                    portion="Medium",
                    preparation="Stir-fried or braised",
                    prefer=_resolves_dampness,
                    window="protein",
                ),
                SlotRule(
                    role="vegetable",
                    categories=("Vegetable",),
                    count=2,
                    portion="Medium",
                    preparation="Lightly cooked",
                    prefer=_cooling_for_heat,
                    window="vegetable",
                ),
                SlotRule(
                    role="qi_mover",
                    categories=("Vegetable", "Spice"),
                    minimum=0,
                    portion="Small",
                    preparation="Added fresh",
                    eligible=_qi_mover,
                ),
            ),
        ),
        MealTemplate(
            meal_type="Dinner",
            admits=_not_damp_forming,
            slots=(
                SlotRule(
                    role="main",
                    categories=("Grain", "Vegetable"),
                    portion="Small",
                    preparation="Soup or steamed",
                    eligible=_light_dinner,
                    window="dinner",
                ),
                SlotRule(
                    role="light_protein",
                    categories=("Legume", "Meat"),
                    minimum=0,
                    portion="Small",
                    preparation="Steamed",
                    eligible=_light_protein,
                    window="protein",
                ),
                SlotRule(
                    role="vegetable",
                    categories=("Vegetable",),
                    minimum=0,
                    portion="Medium",
                    preparation="Steamed",
                    window="vegetable",
                ),
                SlotRule(
                    role="spice",
                    categories=("Spice",),
                    minimum=0,
                    portion="Pinch",
                    preparation="Warming addition",
                    eligible=_warming_spice,
                ),
            ),
        ),
    ),
    narrate=_narrate,
    incompatibilities=(
        IncompatiblePair(in_category("Dairy"), in_category("Fruit"), "Milk with fruit"),
    ),
    rotation_caps={"Grain": 2, "Legume": 2, "Meat": 2, "Vegetable": 3},
    rotation_windows={
        "breakfast": 7,
        "dinner": 7,
        "grain": 3,
        "protein": 3,
        "vegetable": 2,
    },
    aliases=("tcm",),
)
