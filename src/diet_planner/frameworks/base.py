"""Rule set contract shared by every framework."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from pydantic import BaseModel, ValidationError

from diet_planner.domain.errors import MissingAttributesError, ProfileValidationError
from diet_planner.domain.foods import FoodRecord
from diet_planner.domain.plans import DailyTargets, Narrative
from diet_planner.domain.scoring import ScoredFood, TieredCatalog

ComponentFn = Callable[[Any, Any, FoodRecord], tuple[float, list[str]]]
FoodPredicate = Callable[[ScoredFood], bool]
SlotPredicate = Callable[[Any, ScoredFood, int], bool]
ProfileText = str | Callable[[Any], str]


class TieringPolicy(Protocol):
    """Splits ranked foods into tiers."""

    labels: tuple[str, str, str]

    def split(self, ranked: tuple[ScoredFood, ...]) -> TieredCatalog:
        """Return the tiered catalog for foods already in rank order."""


@dataclass(frozen=True)
class ScoringComponent:
    """One signed contribution to a food's score."""

    name: str
    evaluate: ComponentFn


def in_category(*categories: str) -> FoodPredicate:
    """Return a predicate matching foods in any of the categories."""

    def _matches(item: ScoredFood) -> bool:
        return item.food.category in categories

    return _matches


def outside_category(*categories: str) -> FoodPredicate:
    def _matches(item: ScoredFood) -> bool:
        return item.food.category not in categories

    return _matches


@dataclass(frozen=True)
class IncompatiblePair:
    """Two kinds of food that must never share a meal."""

    first: FoodPredicate
    second: FoodPredicate
    reason: str

    def conflicts(self, a: ScoredFood, b: ScoredFood) -> bool:
        return (self.first(a) and self.second(b)) or (self.first(b) and self.second(a))


@dataclass(frozen=True)
class SlotRule:
    """A role inside a meal, such as the grain or the two vegetables at lunch.

    ``count`` is how many foods the slot wants and ``minimum`` how many it needs
    before the meal counts as under-filled. ``eligible`` narrows candidates for a
    profile and day, ``prefer`` moves matching candidates to the front without
    excluding the rest, and ``window`` names the rotation window the pick is
    recorded in.
    """

    role: str
    categories: tuple[str, ...]
    count: int = 1
    minimum: int = 1
    portion: ProfileText = "Medium"
    preparation: ProfileText = ""
    eligible: SlotPredicate | None = None
    prefer: SlotPredicate | None = None
    window: str | None = None
    calorie_factor: float = 1.0

    def portion_for(self, profile: Any) -> str:
        return self.portion(profile) if callable(self.portion) else self.portion

    def preparation_for(self, profile: Any) -> str:
        if callable(self.preparation):
            return self.preparation(profile)
        return self.preparation


@dataclass(frozen=True)
class MealTemplate:
    """Selection rules for one meal of the day."""

    meal_type: str
    slots: tuple[SlotRule, ...]
    include_moderate: bool = True
    admits: FoodPredicate | None = None
    calorie_share: float | None = None
    calorie_tolerance: float = 1.1


@dataclass(frozen=True)
class FrameworkRuleSet:
    """Everything the generic engine needs to know about one framework."""

    name: str
    display_name: str
    attribute_key: str
    profile_model: type[BaseModel]
    attribute_model: type[BaseModel]
    components: tuple[ScoringComponent, ...]
    tiering: TieringPolicy
    meals: tuple[MealTemplate, ...]
    narrate: Callable[[Any], Narrative]
    incompatibilities: tuple[IncompatiblePair, ...] = ()
    rotation_caps: Mapping[str, int] = field(default_factory=dict)
    rotation_windows: Mapping[str, int] = field(default_factory=dict)
    score_precision: int | None = None
    day_guidelines: Callable[[Any], tuple[str, ...]] | None = None
    daily_targets: Callable[[Any], DailyTargets] | None = None
    calories_of: Callable[[ScoredFood], float] | None = None
    aliases: tuple[str, ...] = ()

    def parse_profile(self, raw: Mapping[str, object] | BaseModel) -> Any:
        """Validate a raw profile, raising ProfileValidationError on bad input."""
        if isinstance(raw, self.profile_model):
            return raw
        payload = raw.model_dump() if isinstance(raw, BaseModel) else raw
        try:
            return self.profile_model.model_validate(payload)
        except ValidationError as exc:
            raise ProfileValidationError.from_pydantic(self.name, exc) from exc

    def read_attributes(self, food: FoodRecord) -> BaseModel:
        """Return the validated attribute block of a food.

        Raises MissingAttributesError when the block is absent and
        pydantic.ValidationError when it is malformed.
        """
        raw = food.attributes.get(self.attribute_key)
        if raw is None:
            raise MissingAttributesError(f"missing {self.attribute_key} attributes")
        return self.attribute_model.model_validate(raw)

    def incompatible(self, candidate: ScoredFood, meal: list[ScoredFood]) -> str | None:
        """Return the reason a candidate clashes with a meal, if any."""
        for other in meal:
            for pair in self.incompatibilities:
                if pair.conflicts(candidate, other):
                    return pair.reason
        return None
