"""Query planner.

Turns a free-text information request into a :class:`Plan` with one reasoning engine call.
Plans are never cached and never retried: a failed or malformed answer is a planning error.
"""

from __future__ import annotations

from datetime import date
from typing import Callable

from pydantic import ValidationError

from seek.config import Settings
from seek.errors import PlanningError, ReasoningError
from seek.llm.client import ReasoningEngine
from seek.logging import get_logger
from seek.models.plan import Plan
from seek.prompts import PLANNING_PROMPT
from seek.utils.tags import extract_json_object

logger = get_logger(__name__)


class QueryPlanner:
    """Plan the searches needed to answer a request."""

    def __init__(
        self,
        llm: ReasoningEngine,
        settings: Settings,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._llm = llm
        self._settings = settings
        self._today = today

    async def plan(self, request: str) -> Plan:
        """Build a plan for ``request``.

        Raises:
            PlanningError: When the engine fails or its answer is not a valid plan.
        """

        prompt = self._build_prompt(request, self._today())
        try:
            raw = await self._llm.complete(
                prompt,
                model=self._settings.reasoning_model,
                max_tokens=self._settings.reasoning_max_tokens,
                temperature=self._settings.reasoning_temperature,
                timeout_s=self._settings.reasoning_timeout_s,
            )
        except ReasoningError as e:
            logger.error("Planning call failed", extra={"request": request, "error": str(e)})
            raise PlanningError(f"failed to plan request: {e}") from e

        plan = self.parse_plan(raw)
        logger.info(
            "Plan ready",
            extra={
                "approved": plan.approved,
                "complexity": plan.complexity.value if plan.complexity else None,
                "steps": len(plan.steps),
            },
        )
        return plan

    @staticmethod
    def _build_prompt(request: str, today: date) -> str:
        return (
            f"{PLANNING_PROMPT}\n\n"
            f"Today is {today.isoformat()}.\n\n"
            f"<information_request>{request}</information_request>"
        )

    @staticmethod
    def parse_plan(raw: str) -> Plan:
        """Parse and validate the engine's answer."""

        data = extract_json_object(raw)
        if data is None:
            logger.warning("Planner output is not JSON. Raw=%s", raw[:400])
            raise PlanningError("planner output does not contain a JSON object")
        try:
            return Plan.model_validate(data)
        except ValidationError as e:
            logger.warning("Planner output is not a valid plan: %s", e)
            raise PlanningError(f"invalid plan: {e}") from e
