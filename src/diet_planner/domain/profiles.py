"""Validated user profiles, one shape per framework."""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

Dosha = Literal["vata", "pitta", "kapha"]
Agni = Literal["Variable", "Sharp", "Slow", "Balanced"]
Season = Literal["Spring", "Summer", "Autumn", "Winter"]
Humor = Literal["dam", "safra", "balgham", "sauda"]
DigestiveStrength = Literal["weak", "slow", "moderate", "strong", "strong_but_hot"]
Pattern = Literal[
    "Cold Pattern",
    "Heat Pattern",
    "Qi Deficiency",
    "Qi Excess",
    "Dampness",
    "Dryness",
    "Liver Qi Stagnation",
    "Liver Heat",
    "Yin Deficiency",
    "Yang Deficiency",
    "Balanced",
]
ColdHeat = Literal["Cold", "Heat", "Balanced"]
RiskLevel = Literal["low", "moderate", "high", "very_high"]
Goal = Literal[
    "weight_loss",
    "muscle_gain",
    "metabolic_health",
    "manage_condition",
    "general_health",
    "athletic_performance",
]

_PROFILE_CONFIG = ConfigDict(frozen=True, extra="ignore")

_AGNI_ALIASES = {
    "vishama": "Variable",
    "variable": "Variable",
    "tikshna": "Sharp",
    "sharp": "Sharp",
    "manda": "Slow",
    "slow": "Slow",
    "sama": "Balanced",
    "balanced": "Balanced",
}


def _lower(value: object) -> object:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class DoshaProfile(BaseModel):
    """Ayurvedic constitution snapshot."""

    model_config = _PROFILE_CONFIG

    dominant: Dosha = Field(validation_alias=AliasChoices("dominant", "dominant_dosha"))
    severity: int = Field(ge=1, le=3)
    agni: Agni
    secondary: Dosha | None = Field(
        default=None, validation_alias=AliasChoices("secondary", "secondary_dosha")
    )
    vikriti: dict[Dosha, float] = Field(default_factory=dict)
    season: Season | None = None

    @field_validator("dominant", "secondary", mode="before")
    @classmethod
    def _normalize_dosha(cls, value: object) -> object:
        return _lower(value)

    @field_validator("agni", mode="before")
    @classmethod
    def _normalize_agni(cls, value: object) -> object:
        if isinstance(value, dict):
            value = value.get("type")
        if isinstance(value, str):
            return _AGNI_ALIASES.get(value.strip().lower(), value)
        return value

    @field_validator("vikriti", mode="before")
    @classmethod
    def _normalize_vikriti(cls, value: object) -> object:
        if isinstance(value, dict):
            return {
                str(key).lower(): level
                for key, level in value.items()
                if str(key).lower() in ("vata", "pitta", "kapha")
            }
        return value


class TemperamentProfile(BaseModel):
    """Unani humoral snapshot."""

    model_config = _PROFILE_CONFIG

    dominant: Humor = Field(validation_alias=AliasChoices("dominant", "dominant_humor"))
    temperament: Humor | None = Field(
        default=None, validation_alias=AliasChoices("temperament", "primary_mizaj")
    )
    secondary: Humor | None = Field(
        default=None, validation_alias=AliasChoices("secondary", "secondary_mizaj")
    )
    severity: int = Field(ge=1, le=3)
    digestive_strength: DigestiveStrength

    @field_validator("dominant", "temperament", "secondary", mode="before")
    @classmethod
    def _normalize_humor(cls, value: object) -> object:
        return _lower(value)

    @property
    def mizaj(self) -> str:
        """Temperament used for balancing; defaults to the dominant humor."""
        return self.temperament or self.dominant


class PatternProfile(BaseModel):
    """TCM pattern snapshot."""

    model_config = _PROFILE_CONFIG

    dominant: Pattern = Field(
        validation_alias=AliasChoices("dominant", "primary_pattern")
    )
    secondary: Pattern | None = Field(
        default=None, validation_alias=AliasChoices("secondary", "secondary_pattern")
    )
    cold_heat: ColdHeat
    severity: int = Field(ge=1, le=3)


class ClinicalProfile(BaseModel):
    """Evidence-based clinical snapshot."""

    model_config = _PROFILE_CONFIG

    dominant: RiskLevel = Field(
        validation_alias=AliasChoices("dominant", "metabolic_risk_level")
    )
    severity: int = Field(ge=1, le=3)
    goals: tuple[Goal, ...] = ("general_health",)
    risk_flags: tuple[str, ...] = ()
    digestive_issues: tuple[str, ...] = ()
    food_intolerances: tuple[str, ...] = ()
    stress_level: Literal["low", "moderate", "high"] | None = None
    sleep_quality: Literal["good", "fair", "poor"] | None = None
    activity_level: Literal["sedentary", "light", "moderate", "high"] | None = Field(
        default=None,
        validation_alias=AliasChoices("activity_level", "physical_activity_level"),
    )
    tdee_kcal: float = Field(default=2000.0, gt=0)

    @field_validator("dominant", mode="before")
    @classmethod
    def _normalize_risk(cls, value: object) -> object:
        return _lower(value)

    @field_validator(
        "risk_flags", "digestive_issues", "food_intolerances", mode="before"
    )
    @classmethod
    def _normalize_flags(cls, value: object) -> object:
        if isinstance(value, list | tuple):
            return tuple(str(item).strip().lower() for item in value)
        return value

    def has_goal(self, *goals: str) -> bool:
        return any(goal in self.goals for goal in goals)


Profile = DoshaProfile | TemperamentProfile | PatternProfile | ClinicalProfile
