"""Evidence-based clinical nutrition rules.

Each component computes a raw score from nutrient thresholds and multiplies it
by a fixed weight: goal alignment x4, metabolic risk x3, digestive x2,
lifestyle x2 and base nutrient quality x1.
"""

from diet_planner.domain.attributes import ClinicalAttributes
from diet_planner.domain.foods import FoodRecord
from diet_planner.domain.plans import DailyTargets, Narrative
from diet_planner.domain.profiles import ClinicalProfile
from diet_planner.domain.scoring import ScoredFood
from diet_planner.frameworks.base import (
    FrameworkRuleSet,
    IncompatiblePair,
    MealTemplate,
    ScoringComponent,
    SlotRule,
    in_category,
    outside_category,
)
from diet_planner.services.tiering import ThresholdTiering

GOAL_WEIGHT = 4
METABOLIC_WEIGHT = 3
DIGESTIVE_WEIGHT = 2
LIFESTYLE_WEIGHT = 2
QUALITY_WEIGHT = 1

INTOLERANCE_PENALTY = -10
IRON_SOURCE_MG = 2.5
LIGHT_DINNER_FAT_G = 15.0

# Calorie adjustment applied to TDEE, first matching goal wins.
_CALORIE_FACTORS = (
    ("weight_loss", 0.80),
    ("muscle_gain", 1.10),
    ("athletic_performance", 1.05),
)

# Protein/carb/fat calorie shares; later goals override earlier ones.
_MACRO_SPLITS = (
    ("weight_loss", (0.30, 0.35, 0.35)),
    ("muscle_gain", (0.30, 0.45, 0.25)),
    ("athletic_performance", (0.25, 0.50, 0.25)),
    ("metabolic_health", (0.25, 0.40, 0.35)),
)
_DEFAULT_MACROS = (0.25, 0.45, 0.30)

SNACK_SHARE = 0.15
_INTOLERANCE_CATEGORIES = {"lactose": "Dairy", "gluten": "Grain"}


def _goal_alignment(
    profile: ClinicalProfile, nutrients: ClinicalAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    raw = 0
    reasons = []
    density = nutrients.calories_per_gram
    gi = nutrients.glycemic_index
    if profile.has_goal("weight_loss"):
        if nutrients.protein_share >= 0.20:
            raw += 4
            reasons.append("High protein share supports weight loss")
        if nutrients.fiber >= 3:
            raw += 3
        if density <= 1.5:
            raw += 3
            reasons.append("Low calorie density")
        if gi is not None and gi <= 55:
            raw += 3
        if density >= 2.5:
            raw -= 4
            reasons.append("Calorie dense")
        if gi is not None and gi > 70:
            raw -= 4
    if profile.has_goal("muscle_gain"):
        if nutrients.protein >= 20:
            raw += 4
            reasons.append("Protein rich for muscle gain")
        if 1.8 <= density <= 2.5:
            raw += 3
        if 0.40 <= nutrients.carb_share <= 0.55:
            raw += 2
        if nutrients.protein < 10:
            raw -= 3
    if profile.has_goal("metabolic_health", "manage_condition"):
        if nutrients.glycemic_load is not None and nutrients.glycemic_load < 10:
            raw += 4
            reasons.append("Low glycemic load")
        if nutrients.micronutrient_density >= 4:
            raw += 3
        if nutrients.fiber >= 3:
            raw += 3
        if nutrients.inflammatory_score >= 4:
            raw -= 4
            reasons.append("Pro-inflammatory")
        if nutrients.saturated_fat > 5:
            raw -= 4
    if profile.has_goal("general_health"):
        if nutrients.micronutrient_density >= 3:
            raw += 2
        if nutrients.fiber >= 2:
            raw += 1
    if profile.has_goal("athletic_performance"):
        if nutrients.carb_share >= 0.45:
            raw += 3
        if nutrients.protein >= 15:
            raw += 2
    return raw * GOAL_WEIGHT, reasons


def _metabolic_risk(  # noqa: PLR0912
    profile: ClinicalProfile, nutrients: ClinicalAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    raw = 0
    reasons = []
    flags = set(profile.risk_flags)
    gi = nutrients.glycemic_index
    gl = nutrients.glycemic_load
    if flags & {"diabetes", "prediabetes"}:
        if gi is not None and gi > 60:
            raw -= 5
            reasons.append(f"High glycemic index ({gi:g}) with blood sugar risk")
        if gl is not None and gl > 15:
            raw -= 5
            reasons.append(f"High glycemic load ({gl:g})")
        if gi is not None and gi < 55:
            raw += 3
            reasons.append("Low glycemic index")
    if "hypertension" in flags:
        if nutrients.sodium_mg > 400:
            raw -= 4
            reasons.append(f"High sodium ({nutrients.sodium_mg:g} mg)")
        if nutrients.sodium_mg > 800:
            raw -= 3
    if "heart_disease" in flags:
        if nutrients.saturated_fat > 5:
            raw -= 5
            reasons.append("High saturated fat")
        if nutrients.trans_fat > 0:
            raw -= 8
            reasons.append("Contains trans fat")
        if nutrients.omega3 > 0.5:
            raw += 3
            reasons.append("Omega-3 source")
    if "kidney_disease" in flags:
        if nutrients.protein > 20:
            raw -= 4
        if nutrients.sodium_mg > 300:
            raw -= 3
    if profile.dominant in ("high", "very_high"):
        if nutrients.sugar > 10:
            raw -= 3
        if nutrients.fiber < 2:
            raw -= 2
    return raw * METABOLIC_WEIGHT, reasons


def _digestive(
    profile: ClinicalProfile, nutrients: ClinicalAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    raw = 0
    reasons = []
    issues = set(profile.digestive_issues)
    if issues & {"acid_reflux", "gerd"}:
        if nutrients.fat > 15:
            raw -= 4
            reasons.append("High fat may trigger reflux")
        if food.category == "Spice":
            raw -= 3
        if nutrients.fat < 5:
            raw += 3
    if "ibs" in issues:
        if food.category in ("Legume", "Dairy"):
            raw -= 3
            reasons.append("Common IBS trigger")
        if nutrients.soluble_fiber > 2:
            raw += 2
    for intolerance in profile.food_intolerances:
        category = _INTOLERANCE_CATEGORIES.get(intolerance)
        if (
            category == food.category
            and not food.has_tag(f"{intolerance}_free")
        ) or food.has_tag(intolerance):
            raw += INTOLERANCE_PENALTY
            reasons.append(f"Conflicts with {intolerance} intolerance")
    if nutrients.fiber >= 3:
        raw += 2
    if nutrients.probiotics:
        raw += 3
        reasons.append("Probiotic")
    return raw * DIGESTIVE_WEIGHT, reasons


def _lifestyle(
    profile: ClinicalProfile, nutrients: ClinicalAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    raw = 0
    reasons = []
    if profile.stress_level == "high":
        if nutrients.magnesium_mg > 50:
            raw += 2
            reasons.append("Magnesium for stress support")
        if nutrients.b_vitamins > 0.2:
            raw += 2
        if nutrients.omega3 > 0.3:
            raw += 2
        if nutrients.caffeine_mg > 50:
            raw -= 3
            reasons.append("Caffeine under high stress")
    if profile.sleep_quality == "poor":
        if nutrients.tryptophan > 0.2:
            raw += 2
            reasons.append("Tryptophan for sleep")
        if nutrients.magnesium_mg > 40:
            raw += 2
        if nutrients.caffeine_mg > 20:
            raw -= 4
            reasons.append("Caffeine disrupts sleep")
    if profile.activity_level == "high":
        if nutrients.carbs >= 15:
            raw += 2
        if nutrients.protein >= 15:
            raw += 2
        if nutrients.calories >= 150:
            raw += 1
    elif profile.activity_level in ("sedentary", "light"):
        if nutrients.calories_per_gram <= 1.0:
            raw += 2
    return raw * LIFESTYLE_WEIGHT, reasons


def _graded(value: float, steps: tuple[tuple[float, int], ...]) -> int:
    for threshold, points in steps:
        if value >= threshold:
            return points
    return 0


def _nutrient_quality(
    profile: ClinicalProfile, nutrients: ClinicalAttributes, food: FoodRecord
) -> tuple[float, list[str]]:
    raw = _graded(nutrients.micronutrient_density, ((5, 4), (4, 3), (3, 2), (2, 1)))
    raw += _graded(nutrients.fiber, ((5, 3), (3, 2), (2, 1)))
    raw += _graded(nutrients.protein, ((20, 3), (15, 2), (10, 1)))
    raw += _graded(nutrients.anti_inflammatory_score, ((4, 3), (3, 2)))
    reasons = []
    if nutrients.micronutrient_density >= 4:
        reasons.append("Nutrient dense")
    if nutrients.added_sugar > 10:
        raw -= 3
        reasons.append("High added sugar")
    if nutrients.preservatives:
        raw -= 2
    if nutrients.artificial_additives:
        raw -= 2
    return raw * QUALITY_WEIGHT, reasons


def daily_targets(profile: ClinicalProfile) -> DailyTargets:
    """Return calorie and macro targets derived from TDEE and goals."""
    calories = profile.tdee_kcal
    for goal, factor in _CALORIE_FACTORS:
        if profile.has_goal(goal):
            calories = profile.tdee_kcal * factor
            break
    protein, carbs, fat = _DEFAULT_MACROS
    for goal, split in _MACRO_SPLITS:
        if profile.has_goal(goal):
            protein, carbs, fat = split
    return DailyTargets(
        calories=round(calories),
        protein_g=round(calories * protein / 4),
        carbs_g=round(calories * carbs / 4),
        fat_g=round(calories * fat / 9),
    )


def _calories(item: ScoredFood) -> float:
    return item.attributes.calories


def _iron_source(item: ScoredFood) -> bool:
    return item.attributes.iron_mg >= IRON_SOURCE_MG


def _light_protein(profile: ClinicalProfile, item: ScoredFood, day: int) -> bool:
    return item.attributes.fat <= LIGHT_DINNER_FAT_G


def _narrate(profile: ClinicalProfile) -> Narrative:
    flags = set(profile.risk_flags)
    focus = []
    if profile.has_goal("weight_loss"):
        focus.append(
            "Calorie-controlled, high-protein, high-fiber foods for sustainable "
            "weight loss"
        )
    if profile.has_goal("muscle_gain"):
        focus.append(
            "Protein-rich foods with adequate carbohydrates for muscle synthesis "
            "and recovery"
        )
    if profile.has_goal("metabolic_health", "manage_condition"):
        focus.append("Low glycemic index, nutrient-dense foods for metabolic function")
    if profile.has_goal("athletic_performance"):
        focus.append("Carbohydrate and protein timing to fuel training")
    if not focus:
        focus.append("Balanced, nutrient-dense whole foods")

    metabolic = []
    if profile.dominant in ("high", "very_high"):
        metabolic.append(
            "Minimizing refined carbohydrates and saturated fats due to elevated "
            "metabolic risk"
        )
    if flags & {"diabetes", "prediabetes"}:
        metabolic.append("Prioritizing low glycemic load foods to manage blood sugar")
    if "hypertension" in flags:
        metabolic.append("Limiting sodium intake to support blood pressure")
    if "heart_disease" in flags:
        metabolic.append("Limiting saturated and trans fats for heart health")
    if "kidney_disease" in flags:
        metabolic.append("Moderating protein and sodium for kidney health")

    adjustments = []
    issues = set(profile.digestive_issues)
    if issues & {"acid_reflux", "gerd"}:
        adjustments.append("Avoiding high-fat and spicy foods to prevent reflux")
    if "ibs" in issues:
        adjustments.append("Selecting low FODMAP options to minimize IBS symptoms")
    if profile.food_intolerances:
        adjustments.append(
            f"Excluding {', '.join(profile.food_intolerances)} due to intolerances"
        )

    lifestyle = []
    if profile.stress_level == "high":
        lifestyle.append("Including magnesium and B-vitamin rich foods for stress")
    if profile.sleep_quality == "poor":
        lifestyle.append("Incorporating tryptophan-rich foods to support sleep")
    if profile.activity_level == "high":
        lifestyle.append("Ensuring carbohydrate and protein intake to fuel activity")

    targets = daily_targets(profile)
    return Narrative(
        summary=(
            f"Clinical profile: {profile.dominant.replace('_', ' ')} metabolic risk, "
            f"goals: {', '.join(goal.replace('_', ' ') for goal in profile.goals)}"
        ),
        primary_goal=focus[0],
        meal_timing=(
            f"Five meals spread across the day: {targets.calories} kcal split 25% "
            "breakfast, 35% lunch, 25% dinner and 15% across two snacks"
        ),
        principles=(
            "Build each meal around a protein source and vegetables",
            "Eat fruit on its own as a snack",
            "Keep legumes and grains in separate meals",
            "Retire a protein or grain after three uses in a week",
        ),
        notes={
            "primary_focus": tuple(focus),
            "metabolic_considerations": tuple(metabolic),
            "dietary_adjustments": tuple(adjustments),
            "lifestyle_recommendations": tuple(lifestyle),
        },
    )


CLINICAL_RULES = FrameworkRuleSet(
    name="clinical",
    display_name="Clinical nutrition",
    attribute_key="clinical",
    profile_model=ClinicalProfile,
    attribute_model=ClinicalAttributes,
    components=(
        ScoringComponent("goal_alignment", _goal_alignment),
        ScoringComponent("metabolic_risk", _metabolic_risk),
        ScoringComponent("digestive", _digestive),
        ScoringComponent("lifestyle", _lifestyle),
        ScoringComponent("nutrient_quality", _nutrient_quality),
    ),
    tiering=ThresholdTiering(),
    meals=(
        MealTemplate(
            meal_type="Breakfast",
            calorie_share=0.25,
            slots=(
                SlotRule(
                    role="protein",
                    categories=("Dairy", "Legume", "Nut", "Meat"),
                    portion="100 g",
                    preparation="Cooked or ready to eat",
                    window="protein",
                ),
                SlotRule(
                    role="grain",
                    categories=("Grain",),
                    minimum=0,
                    portion="100 g",
                    preparation="Whole grain",
                    window="grain",
                ),
                SlotRule(
                    role="vegetable",
                    categories=("Vegetable",),
                    minimum=0,
                    portion="100 g",
                    preparation="Fresh or sauteed",
                    window="vegetable",
                ),
            ),
        ),
        MealTemplate(
            meal_type="Morning Snack",
            calorie_share=SNACK_SHARE * 0.4,
            calorie_tolerance=1.2,
            slots=(
                SlotRule(
                    role="snack",
                    categories=("Fruit", "Nut", "Dairy", "Vegetable"),
                    portion="50 g",
                    preparation="Fresh",
                    window="snack",
                    calorie_factor=0.5,
                ),
            ),
        ),
        MealTemplate(
            meal_type="Lunch",
            calorie_share=0.35,
            slots=(
                SlotRule(
                    role="protein",
                    categories=("Meat", "Legume"),
                    portion="150 g",
                    preparation="Grilled, baked or stewed",
                    window="protein",
                    calorie_factor=1.5,
                ),
                SlotRule(
                    role="grain",
                    categories=("Grain",),
                    minimum=0,
                    portion="100 g",
                    preparation="Whole grain",
                    window="grain",
                ),
                SlotRule(
                    role="vegetable",
                    categories=("Vegetable",),
                    count=2,
                    portion="100 g",
                    preparation="Steamed or roasted",
                    window="vegetable",
                ),
                SlotRule(
                    role="oil",
                    categories=("Oil",),
                    minimum=0,
                    portion="1 tsp",
                    preparation="For cooking",
                    calorie_factor=0.05,
                ),
            ),
        ),
        MealTemplate(
            meal_type="Afternoon Snack",
            calorie_share=SNACK_SHARE * 0.6,
            calorie_tolerance=1.2,
            slots=(
                SlotRule(
                    role="snack",
                    categories=("Fruit", "Nut", "Dairy", "Vegetable"),
                    portion="50 g",
                    preparation="Fresh",
                    window="snack",
                    calorie_factor=0.5,
                ),
            ),
        ),
        MealTemplate(
            meal_type="Dinner",
            calorie_share=0.25,
            slots=(
                SlotRule(
                    role="protein",
                    categories=("Meat", "Legume"),
                    portion="120 g",
                    preparation="Baked or steamed",
                    eligible=_light_protein,
                    window="protein",
                    calorie_factor=1.2,
                ),
                SlotRule(
                    role="vegetable",
                    categories=("Vegetable",),
                    count=2,
                    portion="100 g",
                    preparation="Steamed",
                    window="vegetable",
                ),
                SlotRule(
                    role="grain",
                    categories=("Grain",),
                    minimum=0,
                    portion="50 g",
                    preparation="Whole grain",
                    window="grain",
                    calorie_factor=0.5,
                ),
            ),
        ),
    ),
    narrate=_narrate,
    incompatibilities=(
        IncompatiblePair(
            _iron_source, in_category("Dairy"), "Dairy limits iron uptake"
        ),
        IncompatiblePair(
            in_category("Legume"), in_category("Grain"), "Heavy protein with starch"
        ),
        IncompatiblePair(
            in_category("Fruit"), outside_category("Fruit"), "Fruit is eaten alone"
        ),
    ),
    rotation_caps={"Grain": 3, "Legume": 3, "Meat": 3, "Dairy": 3, "Nut": 3},
    rotation_windows={"grain": 1, "protein": 1, "vegetable": 1, "snack": 1},
    score_precision=1,
    daily_targets=daily_targets,
    calories_of=_calories,
    aliases=("modern",),
)
