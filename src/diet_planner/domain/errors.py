"""Error types raised by the planning engine."""

from pydantic import ValidationError


class ProfileValidationError(ValueError):
    """Raised when a profile is missing required fields or has invalid values."""

    def __init__(self, framework: str, errors: list[dict[str, str]]) -> None:
        self.framework = framework
        self.errors = errors
        details = "; ".join(f"{error['field']}: {error['message']}" for error in errors)
        super().__init__(f"Invalid {framework} profile: {details}")

    @classmethod
    def from_pydantic(
        cls, framework: str, exc: ValidationError
    ) -> "ProfileValidationError":
        """Build from a pydantic validation error."""
        return cls(framework, summarize_validation_error(exc))


class UnknownFrameworkError(LookupError):
    """Raised when a framework name is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown framework: {name}")


class FoodNotFoundError(LookupError):
    """Raised when a food id is not in the catalog."""

    def __init__(self, food_id: str) -> None:
        self.food_id = food_id
        super().__init__(f"Food not found: {food_id}")


class MissingAttributesError(ValueError):
    """Raised when a food lacks the attribute block a framework needs."""


def summarize_validation_error(exc: ValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into field/message pairs."""
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]) or "profile",
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
