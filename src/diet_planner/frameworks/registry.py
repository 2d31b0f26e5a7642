"""Lookup of framework rule sets by name."""

from collections.abc import Iterator
from dataclasses import dataclass, field

from diet_planner.domain.errors import UnknownFrameworkError
from diet_planner.frameworks.base import FrameworkRuleSet
from diet_planner.frameworks.clinical import CLINICAL_RULES
from diet_planner.frameworks.dosha import DOSHA_RULES
from diet_planner.frameworks.pattern import PATTERN_RULES
from diet_planner.frameworks.temperament import TEMPERAMENT_RULES

DEFAULT_RULE_SETS = (DOSHA_RULES, TEMPERAMENT_RULES, PATTERN_RULES, CLINICAL_RULES)


@dataclass
class FrameworkRegistry:
    """Holds the rule sets the engine can plan with."""

    rule_sets: dict[str, FrameworkRuleSet] = field(default_factory=dict)
    _aliases: dict[str, str] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        for rule_set in list(self.rule_sets.values()):
            self._index(rule_set)

    @classmethod
    def default(cls) -> "FrameworkRegistry":
        """Return a registry with the four built-in frameworks."""
        registry = cls()
        for rule_set in DEFAULT_RULE_SETS:
            registry.register(rule_set)
        return registry

    def register(self, rule_set: FrameworkRuleSet) -> None:
        """Add or replace a rule set."""
        self.rule_sets[rule_set.name] = rule_set
        self._index(rule_set)

    def _index(self, rule_set: FrameworkRuleSet) -> None:
        for alias in (rule_set.name, *rule_set.aliases):
            self._aliases[alias.lower()] = rule_set.name

    def get(self, name: str) -> FrameworkRuleSet:
        """Return a rule set by name or alias."""
        canonical = self._aliases.get(name.strip().lower())
        if canonical is None:
            raise UnknownFrameworkError(name)
        return self.rule_sets[canonical]

    def names(self) -> list[str]:
        return list(self.rule_sets)

    def __iter__(self) -> Iterator[FrameworkRuleSet]:
        return iter(self.rule_sets.values())
