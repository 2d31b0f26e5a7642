"""Food catalog records."""

from typing import Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

Category = Literal[
    "Grain",
    "Vegetable",
    "Fruit",
    "Dairy",
    "Meat",
    "Spice",
    "Oil",
    "Legume",
    "Nut",
    "Beverage",
]

ATTRIBUTE_KEYS: tuple[str, ...] = ("ayurveda", "unani", "tcm", "clinical")


class FoodRecord(BaseModel):
    """Catalog food carrying optional per-framework attribute blocks.

    Attribute blocks are kept as raw mappings and validated by each framework
    when it scores the food, so a malformed block only removes the food from
    that one framework.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str = Field(validation_alias=AliasChoices("name", "food_name"))
    category: Category
    seasonality: tuple[str, ...] = ()
    tags: frozenset[str] = frozenset()
    allergens: frozenset[str] = frozenset()
    ingredients: tuple[str, ...] = ()
    attributes: dict[str, object] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_attribute_blocks(cls, data: object) -> object:
        if not isinstance(data, dict):
            return data
        collected = dict(data)
        attributes = dict(collected.get("attributes") or {})
        for key in ATTRIBUTE_KEYS:
            if key in collected:
                block = collected.pop(key)
                if block is not None:
                    attributes.setdefault(key, block)
        collected["attributes"] = attributes
        return collected

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("tags", "allergens", mode="before")
    @classmethod
    def _normalize_tags(cls, value: object) -> object:
        if isinstance(value, list | tuple | set | frozenset):
            return frozenset(str(tag).strip().lower() for tag in value)
        return value

    @field_validator("ingredients", mode="before")
    @classmethod
    def _normalize_ingredients(cls, value: object) -> object:
        if isinstance(value, list | tuple):
            return tuple(str(item).strip().lower() for item in value)
        return value

    def has_tag(self, tag: str) -> bool:
        """Return True when the food carries the given tag."""
        return tag.lower() in self.tags

    @property
    def is_vegetarian(self) -> bool:
        """Return True when the food contains no meat."""
        return self.category != "Meat" and not self.has_tag("non_vegetarian")
