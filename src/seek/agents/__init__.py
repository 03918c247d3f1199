"""Agents."""

from __future__ import annotations

from seek.agents.compiler import CompilationReducer
from seek.agents.planner import QueryPlanner

__all__ = ["QueryPlanner", "CompilationReducer"]
