"""Pydantic models used across the project."""

from __future__ import annotations

from seek.models.compilation import CompilationResult, RelevanceResult
from seek.models.page import AcquisitionResult, Page, PageError
from seek.models.plan import Complexity, Plan, ReduceStep, SearchStep, Step
from seek.models.search import SearchOptions, SearchResult

__all__ = [
    "AcquisitionResult",
    "CompilationResult",
    "Complexity",
    "Page",
    "PageError",
    "Plan",
    "ReduceStep",
    "RelevanceResult",
    "SearchOptions",
    "SearchResult",
    "SearchStep",
    "Step",
]
