"""User preference filters for recommendations and plans."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from diet_planner.domain.foods import Category


class PlanPreferences(BaseModel):
    """Filters accepted in snake_case or camelCase."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    limit: int | None = Field(default=None, ge=1)
    min_score: float | None = None
    category: Category | None = None
    exclude_ingredients: tuple[str, ...] = ()
    vegetarian_only: bool = False
    exclude_allergens: tuple[str, ...] = ()
    medical_conditions: tuple[str, ...] = ()
    dietary_restrictions: tuple[str, ...] = ()
