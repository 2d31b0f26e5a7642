"""Contraindication results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SafetyVerdict:
    """Outcome of the contraindication checks for one food."""

    blocked: bool = False
    warnings: tuple[str, ...] = ()

    def combine(self, other: "SafetyVerdict") -> "SafetyVerdict":
        return SafetyVerdict(
            blocked=self.blocked or other.blocked,
            warnings=(*self.warnings, *other.warnings),
        )


@dataclass(frozen=True)
class BlockedFood:
    food_id: str
    name: str
    warnings: tuple[str, ...]
