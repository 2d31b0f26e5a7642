"""Optional language polishing of plan explanations."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from diet_planner.domain.plans import Reasoning
from diet_planner.services.reasoning import render_reasoning

_logger = logging.getLogger(__name__)

POLISH_INSTRUCTIONS = (
    "Rewrite the following diet plan explanation so it reads warmly and clearly "
    "for the person following the plan. Keep every fact, food name, number and "
    "recommendation exactly as given. Do not add, remove or change any advice. "
    "Return only the rewritten text."
)


class PolishClient(Protocol):
    """Interface for an LLM that rewords text."""

    async def rewrite(self, *, model: str, instructions: str, text: str) -> str:
        """Return the reworded text."""


@dataclass(frozen=True)
class PolishedReasoning:
    text: str
    polished: bool


@dataclass
class ReasoningPolisher:
    """Best-effort rewording; falls back to the template text on any failure."""

    client: PolishClient | None
    model: str
    timeout_seconds: float = 8.0

    async def polish(self, reasoning: Reasoning) -> PolishedReasoning:
        """Return polished text, or the deterministic text if polishing fails."""
        text = render_reasoning(reasoning)
        if self.client is None:
            return PolishedReasoning(text=text, polished=False)
        try:
            rewritten = await asyncio.wait_for(
                self.client.rewrite(
                    model=self.model, instructions=POLISH_INSTRUCTIONS, text=text
                ),
                timeout=self.timeout_seconds,
            )
        except Exception:
            _logger.exception("Reasoning polish failed; using template text")
            return PolishedReasoning(text=text, polished=False)
        if not rewritten or not rewritten.strip():
            _logger.warning("Reasoning polish returned empty text; using template text")
            return PolishedReasoning(text=text, polished=False)
        return PolishedReasoning(text=rewritten.strip(), polished=True)
