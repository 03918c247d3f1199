"""OpenAI-compatible reasoning engine.

This wraps the async `openai` SDK and exposes a single ``complete`` call. Retries are left to
nobody: a failed call is reported once as :class:`ReasoningError` and the caller decides how
much of the run it takes down.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Literal, Protocol

from openai import AsyncOpenAI
from pydantic import BaseModel

from seek.config import Settings
from seek.errors import ReasoningError
from seek.logging import get_logger

logger = get_logger(__name__)

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    """A chat message."""

    role: Role
    content: str


class ReasoningEngine(Protocol):
    """Text generation capability used for planning, extraction and report assembly."""

    async def complete(
        self,
        user_prompt: str,
        *,
        model: str,
        max_tokens: int,
        system_prompt: str | None = None,
        temperature: float | None = None,
        response_schema: type[BaseModel] | None = None,
        timeout_s: float | None = None,
    ) -> str:
        """Generate one completion."""


def build_messages(user_prompt: str, system_prompt: str | None = None) -> list[ChatMessage]:
    """Assemble the chat messages for one call."""

    messages: list[ChatMessage] = []
    if system_prompt:
        messages.append(ChatMessage(role="system", content=system_prompt))
    messages.append(ChatMessage(role="user", content=user_prompt))
    return messages


def json_schema_format(schema: type[BaseModel]) -> dict:
    """Build an OpenAI ``response_format`` payload for a pydantic model."""

    return {
        "type": "json_schema",
        "json_schema": {
            "name": schema.__name__,
            "schema": schema.model_json_schema(),
            "strict": True,
        },
    }


class OpenAIReasoningEngine:
    """Reasoning engine using the OpenAI-compatible Chat Completions API."""

    def __init__(self, settings: Settings, *, client: AsyncOpenAI | None = None) -> None:
        self._settings = settings
        if client is None:
            if not settings.openai_api_key:
                raise ValueError(
                    "Missing SEEK_OPENAI_API_KEY. "
                    "Set it in environment variables or a .env file."
                )
            client = AsyncOpenAI(
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                max_retries=0,
            )
        self._client = client

    async def complete(
        self,
        user_prompt: str,
        *,
        model: str,
        max_tokens: int,
        system_prompt: str | None = None,
        temperature: float | None = None,
        response_schema: type[BaseModel] | None = None,
        timeout_s: float | None = None,
    ) -> str:
        """Generate a completion.

        Args:
            user_prompt: User message.
            model: Model name.
            max_tokens: Completion token budget.
            system_prompt: Optional system message.
            temperature: Sampling temperature; omitted when ``None`` (reasoning models
                reject it).
            response_schema: Pydantic model the output must conform to, as JSON.
            timeout_s: Bound for the whole call.

        Returns:
            Assistant message content.

        Raises:
            ReasoningError: On API error, timeout or empty output.
        """

        payload = [{"role": m.role, "content": m.content} for m in build_messages(user_prompt, system_prompt)]
        params: dict = {
            "model": model,
            "messages": payload,
            "max_completion_tokens": max_tokens,
        }
        if temperature is not None:
            params["temperature"] = temperature
        if response_schema is not None:
            params["response_format"] = json_schema_format(response_schema)
        if timeout_s is not None:
            params["timeout"] = timeout_s

        started = time.monotonic()
        try:
            async with asyncio.timeout(timeout_s):
                resp = await self._client.chat.completions.create(**params)
        except TimeoutError as e:
            raise ReasoningError(f"reasoning call timed out after {timeout_s}s") from e
        except Exception as e:
            raise ReasoningError(f"reasoning call failed: {e}") from e

        choice = resp.choices[0]
        logger.info(
            "Completion finished",
            extra={
                "model": resp.model,
                "finish_reason": choice.finish_reason,
                "prompt_tokens": resp.usage.prompt_tokens if resp.usage else None,
                "completion_tokens": resp.usage.completion_tokens if resp.usage else None,
                "max_tokens": max_tokens,
                "latency_ms": int((time.monotonic() - started) * 1000),
            },
        )
        if not choice.message or not choice.message.content:
            raise ReasoningError(f"empty completion (finish_reason={choice.finish_reason})")
        return choice.message.content

    async def aclose(self) -> None:
        await self._client.close()
