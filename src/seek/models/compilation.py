"""Structured outputs requested from the reasoning engine."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RelevanceResult(BaseModel):
    """Per-page relevance verdict and the key points it contributes."""

    model_config = ConfigDict(extra="forbid")

    relevance: bool = Field(description="Whether the page is relevant to the request")
    answer: str = Field(description="The key points from the page")


class CompilationResult(BaseModel):
    """Folded text for one topic."""

    model_config = ConfigDict(extra="forbid")

    compilation: str = Field(description="The compiled result")
