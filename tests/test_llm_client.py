"""Tests for the OpenAI reasoning engine adapter, with a fake SDK client."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from seek.errors import ReasoningError
from seek.llm.client import OpenAIReasoningEngine, build_messages, json_schema_format
from seek.models.compilation import RelevanceResult


class FakeCompletions:
    def __init__(self, content: str | None = "ok", *, error: Exception | None = None, delay_s: float = 0.0):
        self.content = content
        self.error = error
        self.delay_s = delay_s
        self.params: dict | None = None

    async def create(self, **params):
        self.params = params
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            model=params["model"],
            usage=SimpleNamespace(prompt_tokens=3, completion_tokens=2),
            choices=[SimpleNamespace(finish_reason="stop", message=SimpleNamespace(content=self.content))],
        )


def _engine(settings, completions: FakeCompletions) -> OpenAIReasoningEngine:
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIReasoningEngine(settings, client=client)  # type: ignore[arg-type]


def test_build_messages() -> None:
    assert [m.role for m in build_messages("u")] == ["user"]
    assert [m.role for m in build_messages("u", "s")] == ["system", "user"]


def test_json_schema_format_is_strict() -> None:
    fmt = json_schema_format(RelevanceResult)
    assert fmt["type"] == "json_schema"
    assert fmt["json_schema"]["name"] == "RelevanceResult"
    assert fmt["json_schema"]["strict"] is True
    assert fmt["json_schema"]["schema"]["additionalProperties"] is False


def test_missing_api_key_is_rejected(settings) -> None:
    with pytest.raises(ValueError):
        OpenAIReasoningEngine(settings.model_copy(update={"openai_api_key": None}))


@pytest.mark.asyncio
async def test_complete_sends_parameters(settings) -> None:
    completions = FakeCompletions('{"relevance": true, "answer": "x"}')
    out = await _engine(settings, completions).complete(
        "prompt",
        model="m",
        max_tokens=10,
        system_prompt="sys",
        temperature=0.1,
        response_schema=RelevanceResult,
        timeout_s=5,
    )

    assert out == '{"relevance": true, "answer": "x"}'
    params = completions.params
    assert params["model"] == "m"
    assert params["max_completion_tokens"] == 10
    assert params["temperature"] == 0.1
    assert params["messages"][0] == {"role": "system", "content": "sys"}
    assert params["response_format"]["type"] == "json_schema"


@pytest.mark.asyncio
async def test_temperature_omitted_when_none(settings) -> None:
    completions = FakeCompletions()
    await _engine(settings, completions).complete("p", model="o1-mini", max_tokens=10)
    assert "temperature" not in completions.params
    assert "response_format" not in completions.params


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "completions",
    [
        FakeCompletions(error=RuntimeError("api down")),
        FakeCompletions(content=None),
        FakeCompletions(delay_s=1.0),
    ],
)
async def test_failures_become_reasoning_errors(settings, completions) -> None:
    with pytest.raises(ReasoningError):
        await _engine(settings, completions).complete("p", model="m", max_tokens=10, timeout_s=0.05)
