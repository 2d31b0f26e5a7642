"""Unani temperament and humor rules."""

from diet_planner.domain.attributes import TemperamentAttributes
from diet_planner.domain.foods import FoodRecord
from diet_planner.domain.plans import Narrative
from diet_planner.domain.profiles import TemperamentProfile
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

HUMOR_QUALITIES = {
    "dam": "Hot + Moist",
    "safra": "Hot + Dry",
    "balgham": "Cold + Moist",
    "sauda": "Cold + Dry",
}

# Qualities a food should carry to counteract each temperament.
BALANCING_QUALITIES = {
    "balgham": ("hot", "dry"),
    "dam": ("cold", "dry"),
    "safra": ("cold", "moist"),
    "sauda": ("hot", "moist"),
}

_OPPOSITES = {"hot": "cold", "cold": "hot", "dry": "moist", "moist": "dry"}

_SIGNIFICANT_LEVEL = 2

_BALANCING_APPROACH = {
    "dam": "cooling and drying foods to balance excess heat and moisture",
    "safra": "cooling and moistening foods to balance excess heat and dryness",
    "balgham": "warming and drying foods to balance excess cold and moisture",
    "sauda": "warming and moistening foods to balance excess cold and dryness",
}

_DIGESTIVE_NOTES = {
    "weak": (
        "Light, easily digestible foods are prioritized. "
        "Heavy and gas-producing foods are avoided."
    ),
    "slow": "Moderately light foods are selected. Very heavy foods are minimized.",
    "moderate": "Balanced approach to food digestibility.",
    "strong": (
        "Regular digestibility foods are suitable. "
        "No major restrictions on food heaviness."
    ),
    "strong_but_hot": (
        "Regular digestibility with preference for cooling foods to manage heat."
    ),
}


def _humor_correction(
    profile: TemperamentProfile, attributes: TemperamentAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    humor = profile.dominant
    effect = attributes.humor_effects.effect_on(humor)
    name = f"{humor.title()} ({HUMOR_QUALITIES[humor]})"
    if effect < 0:
        delta = 4 * profile.severity
        return delta, [f"Reduces {name} (+{delta})"]
    if effect > 0:
        delta = -4 * profile.severity
        return delta, [f"Increases {name} ({delta})"]
    return profile.severity, [f"Neutral for {name} (+{profile.severity})"]


def _temperament_balance(
    profile: TemperamentProfile, attributes: TemperamentAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    delta = 0
    reasons = []
    for quality in BALANCING_QUALITIES[profile.mizaj]:
        if attributes.temperament.level(quality) >= _SIGNIFICANT_LEVEL:
            delta += 2
            reasons.append(f"Counteracts with {quality} quality (+2)")
        reinforcing = _OPPOSITES[quality]
        if attributes.temperament.level(reinforcing) >= _SIGNIFICANT_LEVEL:
            delta -= 2
            reasons.append(f"Reinforces with {reinforcing} quality (-2)")
    return delta, reasons


def _digestive_adjustment(
    profile: TemperamentProfile, attributes: TemperamentAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    strength = profile.digestive_strength
    digestibility = attributes.digestibility_level
    if strength == "weak":
        if digestibility >= 4 or attributes.flatulence_potential == "high":
            return -3, ["Hard on weak digestion (-3)"]
        if digestibility <= 2:
            return 2, ["Light for weak digestion (+2)"]
    elif strength == "slow":
        if digestibility >= 5:
            return -2, ["Very heavy for slow digestion (-2)"]
        if digestibility <= 2:
            return 2, ["Light for slow digestion (+2)"]
    return 0, []


def _is_light(item: ScoredFood) -> bool:
    return item.attributes.is_light


def _warming_breakfast(profile: TemperamentProfile, item: ScoredFood, day: int) -> bool:
    return profile.mizaj != "balgham" or item.attributes.temperament.hot_level >= 2


def _dinner_fit(profile: TemperamentProfile, item: ScoredFood, day: int) -> bool:
    levels = item.attributes.temperament
    if profile.mizaj == "balgham" and levels.moist_level >= 3:
        return False
    return not (profile.mizaj == "sauda" and levels.dry_level >= 3)


def _narrate(profile: TemperamentProfile) -> Narrative:
    humor = profile.dominant
    return Narrative(
        summary=(
            f"Dominant humor: {humor.title()} ({HUMOR_QUALITIES[humor]}) "
            f"at severity level {profile.severity}"
        ),
        primary_goal=(
            f"Correct {humor.title()} with foods that reduce it; "
            f"selected {_BALANCING_APPROACH[profile.mizaj]} based on "
            f"{profile.mizaj.upper()} temperament"
        ),
        meal_timing=(
            "Dinner is kept lighter than lunch to avoid overloading digestion in the "
            "evening. Breakfast is light and warming to gently activate digestion."
        ),
        principles=(
            f"Favor foods that reduce {humor.title()}",
            f"Choose {_BALANCING_APPROACH[profile.mizaj]}",
            _DIGESTIVE_NOTES[profile.digestive_strength],
            "Limit each grain and protein to two meals a week",
        ),
    )


TEMPERAMENT_RULES = FrameworkRuleSet(
    name="temperament",
    display_name="Unani",
    attribute_key="unani",
    profile_model=TemperamentProfile,
    attribute_model=TemperamentAttributes,
    components=(
        ScoringComponent("humor_correction", _humor_correction),
        ScoringComponent("temperament_balance", _temperament_balance),
        ScoringComponent("digestive_adjustment", _digestive_adjustment),
    ),
    tiering=PercentileTiering(
        labels=("highly_suitable", "moderately_suitable", "avoid"),
        round_avoid_up=True,
    ),
    meals=(
        MealTemplate(
            meal_type="Breakfast",
            admits=_is_light,
            slots=(
                SlotRule(
                    role="main",
                    categories=("Grain", "Fruit", "Dairy"),
                    portion="Medium",
                    preparation="Warm, lightly cooked",
                    eligible=_warming_breakfast,
                    window="breakfast",
                ),
                SlotRule(
                    role="beverage",
                    categories=("Beverage",),
                    minimum=0,
                    portion="1 cup",
                    preparation="Warm",
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
                    preparation="Slow cooked",
                    window="protein",
                ),
                SlotRule(
                    role="vegetable",
                    categories=("Vegetable",),
                    count=2,
                    portion="Medium",
                    preparation="Cooked",
                    window="vegetable",
                ),
                SlotRule(
                    role="spice",
                    categories=("Spice",),
                    count=2,
                    minimum=0,
                    portion="Pinch",
                    preparation="In cooking",
                ),
            ),
        ),
        MealTemplate(
            meal_type="Dinner",
            admits=_is_light,
            slots=(
                SlotRule(
                    role="main",
                    categories=("Vegetable", "Grain"),
                    count=2,
                    portion="Small",
                    preparation="Light, well cooked",
                    eligible=_dinner_fit,
                    window="dinner",
                ),
                SlotRule(
                    role="beverage",
                    categories=("Beverage",),
                    minimum=0,
                    portion="1 cup",
                    preparation="Warm",
                ),
            ),
        ),
    ),
    narrate=_narrate,
    incompatibilities=(
        IncompatiblePair(in_category("Dairy"), in_category("Fruit"), "Milk with fruit"),
    ),
    rotation_caps={"Grain": 2, "Legume": 2, "Meat": 2},
    rotation_windows={
        "grain": 3,
        "protein": 3,
        "vegetable": 2,
        "breakfast": 7,
        "dinner": 7,
    },
    aliases=("unani",),
)
