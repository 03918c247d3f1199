from __future__ import annotations

from seek.prompts.compiler import (
    COMPILATION_PROMPT,
    FINAL_REPORT_PROMPT,
    RELEVANCE_PROMPT,
    RESEARCHER_SYSTEM_PROMPT,
)
from seek.prompts.planner import PLANNING_PROMPT

__all__ = [
    "PLANNING_PROMPT",
    "RESEARCHER_SYSTEM_PROMPT",
    "RELEVANCE_PROMPT",
    "COMPILATION_PROMPT",
    "FINAL_REPORT_PROMPT",
]
