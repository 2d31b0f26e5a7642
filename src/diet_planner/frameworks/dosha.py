"""Ayurvedic dosha rules."""

from diet_planner.domain.attributes import DoshaAttributes
from diet_planner.domain.foods import FoodRecord
from diet_planner.domain.plans import Narrative
from diet_planner.domain.profiles import DoshaProfile
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

DOSHAS = ("vata", "pitta", "kapha")

ELEVATED_VIKRITI = 40.0
DEFAULT_VIKRITI = 33.0

_BENEFICIAL_RASA = {
    "vata": frozenset({"Sweet", "Sour", "Salty"}),
    "pitta": frozenset({"Sweet", "Bitter", "Astringent"}),
    "kapha": frozenset({"Pungent", "Bitter", "Astringent"}),
}

# Guna deltas per agni type. Balanced agni gets a flat bonus instead.
_AGNI_GUNA = {
    "Variable": {"Light": 3.0, "Heavy": -3.0, "Oily": 1.0},
    "Sharp": {"Oily": -2.0, "Dry": 1.0},
    "Slow": {"Light": 3.0, "Heavy": -3.0, "Oily": -2.0, "Dry": 2.0},
}

_LUNCH_PROTEIN = {
    "pitta": ("Legume", "Dairy"),
    "kapha": ("Legume",),
    "vata": ("Legume", "Dairy", "Meat", "Nut"),
}

_MEAL_TIMING = {
    "Variable": "Regular meal times crucial; avoid skipping meals",
    "Sharp": "Never skip meals; eat on time to prevent aggravation",
    "Slow": "Light meals; can skip breakfast if not hungry; avoid overeating",
    "Balanced": "Flexible timing; maintain consistency",
}

_SEVERITY_LABELS = {1: "Mild", 2: "Moderate", 3: "Severe"}

_STABILITY_STEP = 0.5

_BASE_GUIDELINES = (
    "Eat in a calm environment",
    "Main meal at midday when Agni is strongest",
    "Avoid cold drinks with meals",
    "Leave 3-4 hours between meals",
)

_DOSHA_GUIDELINES = {
    "vata": ("Favor warm, oily, grounding foods", "Eat at regular times"),
    "pitta": ("Favor cooling, non-spicy foods", "Avoid skipping meals"),
    "kapha": ("Favor light, dry, warm foods", "Can skip breakfast if not hungry"),
}


def elevated_secondary(profile: DoshaProfile) -> str | None:
    """Return the most elevated non-dominant dosha above the threshold."""
    selected = None
    highest = ELEVATED_VIKRITI
    for dosha in DOSHAS:
        if dosha == profile.dominant:
            continue
        level = profile.vikriti.get(dosha, DEFAULT_VIKRITI)
        if level > highest:
            selected, highest = dosha, level
    return selected


def _constitution_correction(
    profile: DoshaProfile, attributes: DoshaAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    dominant = profile.dominant
    effect = attributes.dosha_effect.effect_on(dominant)
    reasons = []
    if effect == "Decrease":
        delta = 4.0 * profile.severity
        reasons.append(f"Decreases {dominant.title()} (+{delta:g})")
    elif effect == "Increase":
        delta = -4.0 * profile.severity
        reasons.append(f"Increases {dominant.title()} ({delta:g})")
    else:
        delta = 1.0
        reasons.append(f"Neutral for {dominant.title()} (+1)")

    secondary = elevated_secondary(profile)
    if secondary is not None:
        secondary_effect = attributes.dosha_effect.effect_on(secondary)
        if secondary_effect == "Increase":
            delta -= 2.0
            reasons.append(f"Also increases elevated {secondary.title()} (-2)")
        elif secondary_effect == "Decrease":
            delta += 1.0
            reasons.append(f"Also calms elevated {secondary.title()} (+1)")
    return delta, reasons


def _digestive_fire(
    profile: DoshaProfile, attributes: DoshaAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    if profile.agni == "Balanced":
        return 1.0, ["Suits balanced Agni (+1)"]
    deltas = _AGNI_GUNA[profile.agni]
    delta = sum(deltas.get(guna, 0.0) for guna in set(attributes.guna))
    if profile.agni == "Sharp" and (
        attributes.has_guna("Light") or attributes.has_guna("Heavy")
    ):
        # Sharp agni digests light and heavy food alike; the bonus counts once.
        delta += 1.0
    if (
        profile.agni == "Variable"
        and attributes.has_guna("Dry")
        and food.category == "Vegetable"
    ):
        delta -= 1.0
    if delta > 0:
        return delta, [f"Supports {profile.agni} Agni (+{delta:g})"]
    if delta < 0:
        return delta, [f"Burdens {profile.agni} Agni ({delta:g})"]
    return 0.0, []


def _potency_season(
    profile: DoshaProfile, attributes: DoshaAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    delta = 0.0
    reasons = []
    if attributes.virya == "Hot":
        delta += -2.0 if profile.dominant == "pitta" else 2.0
        reasons.append(f"Heating potency ({delta:+g})")
    elif attributes.virya == "Cold":
        delta += 2.0 if profile.dominant == "pitta" else -1.0
        reasons.append(f"Cooling potency ({delta:+g})")
    in_season = "All Seasons" in food.seasonality or (
        profile.season is not None and profile.season in food.seasonality
    )
    if in_season:
        delta += 1.0
        reasons.append("In season (+1)")
    return delta, reasons


def _taste_quality(
    profile: DoshaProfile, attributes: DoshaAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    beneficial = _BENEFICIAL_RASA[profile.dominant]
    matched = [rasa for rasa in attributes.rasa if rasa in beneficial]
    delta = len(matched) - 0.5 * (len(attributes.rasa) - len(matched))
    if profile.dominant == "vata":
        delta += _STABILITY_STEP * (
            attributes.has_guna("Stable") - attributes.has_guna("Mobile")
        )
    elif profile.dominant == "kapha":
        delta += _STABILITY_STEP * (
            attributes.has_guna("Mobile") - attributes.has_guna("Stable")
        )
    reasons = []
    if matched:
        reasons.append(f"Beneficial tastes: {', '.join(matched)}")
    return delta, reasons


def _light_breakfast(item: ScoredFood) -> bool:
    return not (item.attributes.has_guna("Heavy") or item.attributes.has_guna("Oily"))


def _not_heavy(item: ScoredFood) -> bool:
    return not item.attributes.has_guna("Heavy")


def _fruit_day(profile: DoshaProfile, item: ScoredFood, day: int) -> bool:
    return item.food.category == "Fruit" and day % 2 == 0


def _breakfast_main(profile: DoshaProfile, item: ScoredFood, day: int) -> bool:
    return item.food.category == "Grain" or _fruit_day(profile, item, day)


def _breakfast_portion(profile: DoshaProfile) -> str:
    return "Small" if profile.agni == "Slow" else "Medium"


def _vegetable_preparation(profile: DoshaProfile) -> str:
    return "Cooked, oiled" if profile.dominant == "vata" else "Lightly cooked"


def _oil_portion(profile: DoshaProfile) -> str:
    return "Small" if profile.dominant == "kapha" else "Medium"


def _lunch_protein(profile: DoshaProfile, item: ScoredFood, day: int) -> bool:
    return item.food.category in _LUNCH_PROTEIN[profile.dominant]


def _dinner_grain(profile: DoshaProfile, item: ScoredFood, day: int) -> bool:
    return profile.agni != "Slow"


def _caffeinated(item: ScoredFood) -> bool:
    return item.food.category == "Beverage" and item.food.has_tag("caffeinated")


def _narrate(profile: DoshaProfile) -> Narrative:
    name = profile.dominant.title()
    severity = _SEVERITY_LABELS[profile.severity]
    if profile.severity >= 2:
        approach = (
            f"Strict {profile.dominant}-pacifying diet with strong emphasis on "
            "balancing foods"
        )
    else:
        approach = (
            f"Gentle {profile.dominant}-balancing diet with moderate restrictions"
        )
    return Narrative(
        summary=(
            f"Dominant Dosha: {name} ({severity} imbalance); "
            f"Digestive Fire: {profile.agni}"
        ),
        primary_goal=(
            f"Balance {name} dosha through foods that decrease "
            f"{profile.dominant} qualities"
        ),
        meal_timing=_MEAL_TIMING[profile.agni],
        principles=(
            f"Favor foods that DECREASE {profile.dominant}",
            "Lunch as main meal (strongest Agni at midday)",
            "Light, warm breakfast and dinner",
            "Avoid incompatible food combinations (Viruddha Ahara)",
            "Eat seasonally appropriate foods",
        ),
        notes={"dietary_approach": (approach,)},
    )


def _day_guidelines(profile: DoshaProfile) -> tuple[str, ...]:
    return _BASE_GUIDELINES + _DOSHA_GUIDELINES[profile.dominant]


DOSHA_RULES = FrameworkRuleSet(
    name="dosha",
    display_name="Ayurveda",
    attribute_key="ayurveda",
    profile_model=DoshaProfile,
    attribute_model=DoshaAttributes,
    components=(
        ScoringComponent("constitution_correction", _constitution_correction),
        ScoringComponent("digestive_fire", _digestive_fire),
        ScoringComponent("potency_season", _potency_season),
        ScoringComponent("taste_quality", _taste_quality),
    ),
    tiering=PercentileTiering(),
    meals=(
        MealTemplate(
            meal_type="Breakfast",
            include_moderate=False,
            admits=_light_breakfast,
            slots=(
                # Fruit and grain never share a meal, so fruit days replace the grain.
                SlotRule(
                    role="main",
                    categories=("Grain", "Fruit"),
                    portion=_breakfast_portion,
                    preparation="Cooked and warm, or fresh fruit at room temperature",
                    eligible=_breakfast_main,
                    prefer=_fruit_day,
                    window="grain",
                ),
                SlotRule(
                    role="beverage",
                    categories=("Beverage",),
                    minimum=0,
                    portion="1 cup",
                    preparation="Warm",
                ),
                SlotRule(
                    role="dairy",
                    categories=("Dairy",),
                    minimum=0,
                    portion="Small",
                    preparation="Warm, lightly spiced",
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
                    categories=("Legume", "Dairy", "Meat", "Nut"),
                    portion="Medium",
                    preparation="Well cooked with digestive spices",
                    eligible=_lunch_protein,
                    window="protein",
                ),
                SlotRule(
                    role="vegetable",
                    categories=("Vegetable",),
                    count=2,
                    portion="Medium",
                    preparation=_vegetable_preparation,
                    window="vegetable",
                ),
                SlotRule(
                    role="oil",
                    categories=("Oil",),
                    minimum=0,
                    portion=_oil_portion,
                    preparation="For cooking",
                ),
                SlotRule(
                    role="spice",
                    categories=("Spice",),
                    minimum=0,
                    portion="Small",
                    preparation="In cooking",
                ),
            ),
        ),
        MealTemplate(
            meal_type="Dinner",
            include_moderate=False,
            admits=_not_heavy,
            slots=(
                SlotRule(
                    role="grain",
                    categories=("Grain",),
                    minimum=0,
                    portion="Small",
                    preparation="Cooked, light",
                    eligible=_dinner_grain,
                    window="grain",
                ),
                SlotRule(
                    role="vegetable",
                    categories=("Vegetable",),
                    count=2,
                    portion="Medium",
                    preparation="Steamed or lightly sauteed",
                    window="vegetable",
                ),
                SlotRule(
                    role="spice",
                    categories=("Spice",),
                    minimum=0,
                    portion="Small",
                    preparation="For digestion",
                ),
            ),
        ),
    ),
    narrate=_narrate,
    incompatibilities=(
        IncompatiblePair(in_category("Dairy"), in_category("Fruit"), "Milk with fruit"),
        IncompatiblePair(in_category("Dairy"), in_category("Meat"), "Milk with meat"),
        IncompatiblePair(in_category("Dairy"), _caffeinated, "Milk with caffeine"),
        IncompatiblePair(
            in_category("Fruit"), in_category("Grain"), "Fruit with grains"
        ),
        IncompatiblePair(in_category("Fruit"), in_category("Meat"), "Fruit with meat"),
    ),
    rotation_caps={"Grain": 2, "Legume": 2, "Meat": 2, "Dairy": 2, "Nut": 2},
    rotation_windows={"grain": 3, "protein": 3, "vegetable": 2},
    day_guidelines=_day_guidelines,
    aliases=("ayurveda",),
)
