"""Weekly plan structures and reasoning."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PlannedFood:
    """A food placed in a meal with serving guidance."""

    food_id: str
    name: str
    category: str
    portion: str
    preparation: str
    score: float
    calories: float | None = None


@dataclass(frozen=True)
class Meal:
    """A single meal; ``missing`` lists slots that could not be filled."""

    meal_type: str
    foods: tuple[PlannedFood, ...]
    calorie_target: int | None = None
    missing: tuple[str, ...] = ()

    @property
    def under_filled(self) -> bool:
        return bool(self.missing)

    @property
    def calories(self) -> float | None:
        values = [food.calories for food in self.foods if food.calories is not None]
        if not values:
            return None
        return round(sum(values), 1)


@dataclass(frozen=True)
class DailyTargets:
    """Calorie and macronutrient targets for one day."""

    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int


@dataclass(frozen=True)
class DayPlan:
    day: int
    meals: tuple[Meal, ...]
    guidelines: tuple[str, ...] = ()
    targets: DailyTargets | None = None


@dataclass(frozen=True)
class PlanningShortfall:
    """A meal that was left with fewer foods than its template asks for."""

    day: int
    meal_type: str
    roles: tuple[str, ...]


@dataclass(frozen=True)
class WeeklyPlan:
    framework: str
    days: tuple[DayPlan, ...]

    @property
    def shortfalls(self) -> tuple[PlanningShortfall, ...]:
        """Return every under-filled meal in the week."""
        return tuple(
            PlanningShortfall(day=day.day, meal_type=meal.meal_type, roles=meal.missing)
            for day in self.days
            for meal in day.meals
            if meal.under_filled
        )

    def meals(self) -> list[Meal]:
        return [meal for day in self.days for meal in day.meals]


@dataclass(frozen=True)
class Narrative:
    """Framework-specific prose for a profile."""

    summary: str
    primary_goal: str
    meal_timing: str
    principles: tuple[str, ...]
    notes: dict[str, tuple[str, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class Reasoning:
    """Deterministic explanation of a plan."""

    framework: str
    summary: str
    primary_goal: str
    meal_timing: str
    principles: tuple[str, ...]
    emphasize: tuple[str, ...]
    avoid: tuple[str, ...]
    notes: dict[str, tuple[str, ...]] = field(default_factory=dict)
