"""Deterministic plan explanations."""

from typing import Any

from diet_planner.domain.plans import Reasoning
from diet_planner.domain.scoring import TieredCatalog
from diet_planner.frameworks.base import FrameworkRuleSet

TOP_FOODS = 10


def build_reasoning(
    rule_set: FrameworkRuleSet, profile: Any, tiered: TieredCatalog
) -> Reasoning:
    """Return the reasoning for a profile and its tiered catalog."""
    narrative = rule_set.narrate(profile)
    worst_first = tuple(reversed(tiered.avoid))
    return Reasoning(
        framework=rule_set.name,
        summary=narrative.summary,
        primary_goal=narrative.primary_goal,
        meal_timing=narrative.meal_timing,
        principles=narrative.principles,
        emphasize=tuple(
            item.food.name for item in tiered.highly_recommended[:TOP_FOODS]
        ),
        avoid=tuple(item.food.name for item in worst_first[:TOP_FOODS]),
        notes=narrative.notes,
    )


def render_reasoning(reasoning: Reasoning) -> str:
    """Render reasoning as plain text."""
    lines = [
        reasoning.summary,
        f"Goal: {reasoning.primary_goal}",
        f"Meal timing: {reasoning.meal_timing}",
        "Guiding principles:",
    ]
    lines.extend(f"- {principle}" for principle in reasoning.principles)
    for heading, entries in reasoning.notes.items():
        if not entries:
            continue
        lines.append(f"{heading.replace('_', ' ').capitalize()}:")
        lines.extend(f"- {entry}" for entry in entries)
    if reasoning.emphasize:
        lines.append(f"Emphasize: {', '.join(reasoning.emphasize)}")
    if reasoning.avoid:
        lines.append(f"Avoid: {', '.join(reasoning.avoid)}")
    return "\n".join(lines)
