"""Framework-specific attribute blocks attached to catalog foods."""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictBool

DoshaEffectValue = Literal["Increase", "Decrease", "Neutral"]
Rasa = Literal["Sweet", "Sour", "Salty", "Pungent", "Bitter", "Astringent"]
Guna = Literal[
    "Heavy",
    "Light",
    "Oily",
    "Dry",
    "Hot",
    "Cold",
    "Stable",
    "Mobile",
    "Soft",
    "Hard",
    "Smooth",
    "Rough",
    "Dense",
    "Liquid",
    "Sharp",
    "Dull",
    "Clear",
    "Sticky",
    "Gross",
    "Subtle",
]
HumorEffect = Literal[-1, 0, 1]
ThermalNature = Literal["Hot", "Warm", "Neutral", "Cool", "Cold"]
Flavor = Literal["Sweet", "Sour", "Bitter", "Pungent", "Salty"]

_BLOCK_CONFIG = ConfigDict(frozen=True, extra="ignore")


class DoshaEffect(BaseModel):
    """Effect of a food on each dosha."""

    model_config = _BLOCK_CONFIG

    vata: DoshaEffectValue
    pitta: DoshaEffectValue
    kapha: DoshaEffectValue

    def effect_on(self, dosha: str) -> DoshaEffectValue:
        """Return the effect on a single dosha."""
        return getattr(self, dosha)


class DoshaAttributes(BaseModel):
    """Ayurvedic properties of a food."""

    model_config = _BLOCK_CONFIG

    dosha_effect: DoshaEffect = Field(
        validation_alias=AliasChoices("dosha_effect", "doshaEffect")
    )
    rasa: tuple[Rasa, ...] = ()
    guna: tuple[Guna, ...] = ()
    virya: Literal["Hot", "Cold"] | None = None
    vipaka: Literal["Sweet", "Sour", "Pungent"] | None = None

    def has_guna(self, guna: str) -> bool:
        return guna in self.guna


class TemperamentLevels(BaseModel):
    """Graded hot/cold/dry/moist qualities, each 0-4."""

    model_config = _BLOCK_CONFIG

    hot_level: int = Field(default=0, ge=0, le=4)
    cold_level: int = Field(default=0, ge=0, le=4)
    dry_level: int = Field(default=0, ge=0, le=4)
    moist_level: int = Field(default=0, ge=0, le=4)

    def level(self, quality: str) -> int:
        """Return the level of a quality such as ``hot`` or ``moist``."""
        return getattr(self, f"{quality}_level")


class HumorEffects(BaseModel):
    """Effect of a food on each humor: -1 reduces, +1 increases."""

    model_config = _BLOCK_CONFIG

    dam: HumorEffect = 0
    safra: HumorEffect = 0
    balgham: HumorEffect = 0
    sauda: HumorEffect = 0

    def effect_on(self, humor: str) -> int:
        return getattr(self, humor)


class TemperamentAttributes(BaseModel):
    """Unani properties of a food."""

    model_config = _BLOCK_CONFIG

    temperament: TemperamentLevels = Field(default_factory=TemperamentLevels)
    humor_effects: HumorEffects = Field(
        default_factory=HumorEffects,
        validation_alias=AliasChoices("humor_effects", "humorEffects"),
    )
    digestibility_level: int = Field(default=3, ge=1, le=5)
    flatulence_potential: Literal["low", "medium", "high"] = "low"

    @property
    def is_light(self) -> bool:
        """Easy to digest and unlikely to cause gas."""
        return self.digestibility_level <= 3 and self.flatulence_potential != "high"


class PatternAttributes(BaseModel):
    """Traditional Chinese medicine properties of a food."""

    model_config = _BLOCK_CONFIG

    thermal_nature: ThermalNature = Field(
        default="Neutral",
        validation_alias=AliasChoices("thermal_nature", "thermalNature"),
    )
    flavor: tuple[Flavor, ...] = ()
    tonifies_qi: StrictBool = False
    nourishes_yin: StrictBool = False
    warms_yang: StrictBool = False
    clears_heat: StrictBool = False
    resolves_dampness: StrictBool = False
    moves_qi: StrictBool = False
    damp_forming: StrictBool = False

    @property
    def is_warming(self) -> bool:
        return self.thermal_nature in ("Warm", "Hot")

    @property
    def is_cooling(self) -> bool:
        return self.thermal_nature in ("Cool", "Cold")

    @property
    def is_light(self) -> bool:
        """Not a sweet, damp-forming food."""
        return not ("Sweet" in self.flavor and self.damp_forming)


class ClinicalAttributes(BaseModel):
    """Nutrient composition per 100 g."""

    model_config = _BLOCK_CONFIG

    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    fiber: float = Field(default=0.0, ge=0)
    soluble_fiber: float = Field(default=0.0, ge=0)
    sugar: float = Field(default=0.0, ge=0)
    added_sugar: float = Field(default=0.0, ge=0)
    glycemic_index: float | None = Field(default=None, ge=0, le=150)
    glycemic_load: float | None = Field(default=None, ge=0)
    sodium_mg: float = Field(default=0.0, ge=0)
    potassium_mg: float = Field(default=0.0, ge=0)
    saturated_fat: float = Field(default=0.0, ge=0)
    trans_fat: float = Field(default=0.0, ge=0)
    omega3: float = Field(default=0.0, ge=0)
    magnesium_mg: float = Field(default=0.0, ge=0)
    b_vitamins: float = Field(default=0.0, ge=0)
    tryptophan: float = Field(default=0.0, ge=0)
    caffeine_mg: float = Field(default=0.0, ge=0)
    iron_mg: float = Field(default=0.0, ge=0)
    micronutrient_density: float = Field(default=0.0, ge=0, le=5)
    anti_inflammatory_score: float = Field(default=0.0, ge=0, le=5)
    inflammatory_score: float = Field(default=0.0, ge=0, le=5)
    probiotics: bool = False
    preservatives: bool = False
    artificial_additives: bool = False

    @property
    def calories_per_gram(self) -> float:
        return self.calories / 100

    @property
    def protein_share(self) -> float:
        """Fraction of calories that come from protein."""
        if self.calories <= 0:
            return 0.0
        return self.protein * 4 / self.calories

    @property
    def carb_share(self) -> float:
        if self.calories <= 0:
            return 0.0
        return self.carbs * 4 / self.calories
