"""Tests for the OpenAI polish client."""

import asyncio

import pytest

from diet_planner.adapters.openai_polish_client import OpenAIPolishClient


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str = "Polished.") -> None:
        self.responses = _FakeResponses(output_text)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def test_openai_polish_client_returns_output_text() -> None:
    fake = _FakeOpenAI()
    client = OpenAIPolishClient(client=fake)

    result = asyncio.run(
        client.rewrite(model="gpt-5.2", instructions="Reword", text="Plan text")
    )

    assert result == "Polished."
    assert fake.responses.last_payload == {
        "model": "gpt-5.2",
        "instructions": "Reword",
        "input": "Plan text",
        "store": False,
    }


def test_openai_polish_client_rejects_empty_output() -> None:
    client = OpenAIPolishClient(client=_FakeOpenAI(output_text=""))

    with pytest.raises(RuntimeError, match="empty response"):
        asyncio.run(client.rewrite(model="gpt-5.2", instructions="x", text="y"))


def test_openai_polish_client_close() -> None:
    fake = _FakeOpenAI()

    asyncio.run(OpenAIPolishClient(client=fake).close())

    assert fake.closed
