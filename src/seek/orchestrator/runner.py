"""Plan execution and the end-to-end research workflow."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Sequence

from seek.agents.compiler import CompilationReducer
from seek.agents.planner import QueryPlanner
from seek.config import Settings
from seek.errors import ExecutionError, PlanRefusedError, ReasoningError, SeekError
from seek.llm.client import OpenAIReasoningEngine, ReasoningEngine
from seek.logging import get_logger, run_context, set_step
from seek.models.page import PageError
from seek.models.plan import Complexity, Plan, ReduceStep, SearchStep
from seek.models.search import SearchOptions
from seek.tools.acquisition import ContentAcquirer, default_tiers
from seek.tools.page_fetcher import PageSource
from seek.tools.web_search import WebSearchProvider, get_search_provider, search_options_from_settings

logger = get_logger(__name__)


def new_run_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class StepFailure:
    """A step that degraded to a placeholder instead of aborting the run."""

    index: int
    topic: str
    error: str


@dataclass
class ExecutionTrace:
    """What happened while executing one plan."""

    run_id: str = "-"
    searches: int = 0
    pages: int = 0
    page_errors: list[PageError] = field(default_factory=list)
    step_failures: list[StepFailure] = field(default_factory=list)
    skipped_steps: list[int] = field(default_factory=list)


def no_findings_for(topic: str, error: Exception | str) -> str:
    return f"No findings for {topic}: {error}"


class PlanExecutor:
    """Run an approved plan against search, acquisition and compilation.

    One executor serves one run: it owns the accumulated findings and the acquirer's page
    cache for that run only.
    """

    def __init__(
        self,
        reducer: CompilationReducer,
        search: WebSearchProvider,
        acquirer: ContentAcquirer,
        settings: Settings,
        *,
        search_options: SearchOptions | None = None,
    ) -> None:
        self._reducer = reducer
        self._search = search
        self._acquirer = acquirer
        self._settings = settings
        self._options = search_options or search_options_from_settings(settings)

    async def run_plan(self, plan: Plan, *, request: str, trace: ExecutionTrace | None = None) -> str:
        """Execute ``plan`` and return the report.

        Raises:
            PlanRefusedError: If the plan was not approved.
            ExecutionError: If the final report could not be written.
        """

        trace = trace if trace is not None else ExecutionTrace()
        if not plan.approved:
            raise PlanRefusedError(plan.reason)

        if plan.complexity is Complexity.SIMPLE:
            return await self._run_simple(plan, request, trace)
        return await self._run_complex(plan, request, trace)

    async def _run_simple(self, plan: Plan, request: str, trace: ExecutionTrace) -> str:
        set_step("simple")
        logger.info("Running simple search", extra={"query": plan.query})
        return await self._search_and_compile(
            1, plan.query or "", topic=request, instructions=plan.compilation_policy, trace=trace
        )

    async def _run_complex(self, plan: Plan, request: str, trace: ExecutionTrace) -> str:
        accumulated = ""
        for index, step in enumerate(plan.steps, start=1):
            set_step(f"{index}:{step.kind}")
            logger.info("Running step", extra={"index": index, "kind": step.kind, "topic": step.topic})

            if isinstance(step, SearchStep):
                section = await self._search_and_compile(
                    index, step.query, topic=step.topic, instructions=step.instructions, trace=trace
                )
                accumulated = f"{accumulated}\n\n{section}" if accumulated else section
            elif isinstance(step, ReduceStep):
                if not accumulated.strip():
                    logger.info("Nothing to reduce, skipping step", extra={"index": index})
                    trace.skipped_steps.append(index)
                    continue
                try:
                    folded = await self._reducer.reduce(accumulated, step.topic, step.instructions)
                except ReasoningError as e:
                    # A failed reduction contributes nothing; earlier findings stay.
                    logger.error("Reduce step failed", extra={"index": index, "topic": step.topic, "error": str(e)})
                    trace.step_failures.append(StepFailure(index=index, topic=step.topic, error=str(e)))
                    continue
                # The folded text replaces what it was folded from.
                accumulated = folded

        set_step("report")
        try:
            return await self._reducer.final_report(
                accumulated, request, plan.outline, plan.compilation_policy
            )
        except ReasoningError as e:
            logger.error("Failed to write final report", extra={"error": str(e)})
            raise ExecutionError(f"failed to write final report: {e}") from e

    async def _search_and_compile(
        self,
        index: int,
        query: str,
        *,
        topic: str,
        instructions: str,
        trace: ExecutionTrace,
    ) -> str:
        try:
            results = await self._search.search(query, self._options)
            trace.searches += 1
            acquired = await self._acquirer.acquire([r.url for r in results])
        except SeekError as e:
            logger.error("Step failed", extra={"index": index, "topic": topic, "error": str(e)})
            trace.step_failures.append(StepFailure(index=index, topic=topic, error=str(e)))
            return no_findings_for(topic, e)

        trace.pages += len(acquired.pages)
        trace.page_errors.extend(acquired.errors)
        pages = acquired.with_titles({r.url: r.title for r in results})
        return await self._reducer.compile_results(pages, topic, instructions)


class ResearchService:
    """Plan and execute one request at a time.

    Page sources are shared across requests; the page cache and accumulated findings are
    created fresh for every request.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        llm: ReasoningEngine,
        search: WebSearchProvider,
        tiers: Sequence[PageSource],
        search_options: SearchOptions | None = None,
    ) -> None:
        self._settings = settings
        self._llm = llm
        self._search = search
        self._tiers = list(tiers)
        self._options = search_options
        self._planner = QueryPlanner(llm, settings)
        self._reducer = CompilationReducer(llm, settings)

    async def __aenter__(self) -> "ResearchService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        for tier in self._tiers:
            await tier.aclose()
        close = getattr(self._llm, "aclose", None)
        if close is not None:
            await close()

    async def answer(self, request: str, *, trace: ExecutionTrace | None = None) -> str:
        """Answer ``request`` with a written report.

        Raises:
            PlanningError: If no valid plan could be made.
            PlanRefusedError: If the planner declined the request.
            ExecutionError: If the final report could not be written.
        """

        run_id = new_run_id()
        trace = trace if trace is not None else ExecutionTrace()
        trace.run_id = run_id
        with run_context(run_id=run_id, step="plan"):
            logger.info("Research started", extra={"request": request})
            plan = await self._planner.plan(request)
            if not plan.approved:
                logger.warning("Request refused", extra={"reason": plan.reason})
                raise PlanRefusedError(plan.reason)

            acquirer = ContentAcquirer(self._settings, tiers=self._tiers)
            executor = PlanExecutor(
                self._reducer, self._search, acquirer, self._settings, search_options=self._options
            )
            report = await executor.run_plan(plan, request=request, trace=trace)
            logger.info(
                "Research finished",
                extra={
                    "searches": trace.searches,
                    "pages": trace.pages,
                    "page_errors": len(trace.page_errors),
                    "step_failures": len(trace.step_failures),
                },
            )
            return report


def build_service(settings: Settings, *, search_options: SearchOptions | None = None) -> ResearchService:
    """Wire the production collaborators from settings."""

    return ResearchService(
        settings,
        llm=OpenAIReasoningEngine(settings),
        search=get_search_provider(settings),
        tiers=default_tiers(settings),
        search_options=search_options,
    )
