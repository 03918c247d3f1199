"""Compilation reducer.

Extracts the relevant part of every page, folds fragments into topic sections and writes the
final report. Page and fold failures degrade to placeholders; only the final report can fail
a run.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Sequence

from pydantic import ValidationError

from seek.config import Settings
from seek.core.concurrency import TaskPool
from seek.errors import ReasoningError
from seek.llm.client import ReasoningEngine
from seek.logging import get_logger
from seek.models.compilation import CompilationResult, RelevanceResult
from seek.models.page import Page
from seek.prompts import (
    COMPILATION_PROMPT,
    FINAL_REPORT_PROMPT,
    RELEVANCE_PROMPT,
    RESEARCHER_SYSTEM_PROMPT,
)

logger = get_logger(__name__)

EXTRACTION_TEMPERATURE = 0.1


def no_findings(topic: str) -> str:
    return f"No relevant information found for {topic}."


def failed_compilation(topic: str, error: Exception | str) -> str:
    return f"[compilation failed for {topic}: {error}]"


class CompilationReducer:
    """Fold page content into topic sections and a final report."""

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

    async def extract_relevant(self, pages: Sequence[Page], topic: str, instructions: str) -> str:
        """Analyze pages concurrently and join the relevant answers.

        Irrelevant pages and pages whose analysis failed contribute nothing. The join order
        follows completion, not input order.
        """

        if not pages:
            return ""

        pool = TaskPool(max_concurrent=self._settings.compile_max_concurrency)
        tasks = [pool.submit(self._analyze_page, page, topic, instructions) for page in pages]
        await pool.join()

        answers = [t.result() for t in tasks if not t.cancelled() and t.exception() is None]
        relevant = [a for a in answers if a]
        logger.info(
            "Extraction finished",
            extra={"topic": topic, "pages": len(pages), "relevant": len(relevant)},
        )
        return "\n\n".join(relevant)

    async def _analyze_page(self, page: Page, topic: str, instructions: str) -> str | None:
        prompt = (
            f"{RELEVANCE_PROMPT}\n\n"
            f"Today is {self._today().isoformat()}.\n\n"
            f"<title>{page.title or ''}</title>\n"
            f"<url>{page.url}</url>\n"
            f"<content>{page.content}</content>\n"
            f"<information_request>{topic}</information_request>\n"
            f"<compilation_instruction>{instructions}</compilation_instruction>"
        )
        try:
            raw = await self._llm.complete(
                prompt,
                model=self._settings.completion_model,
                max_tokens=self._settings.completion_max_tokens,
                system_prompt=RESEARCHER_SYSTEM_PROMPT,
                temperature=EXTRACTION_TEMPERATURE,
                response_schema=RelevanceResult,
                timeout_s=self._settings.completion_timeout_s,
            )
            result = RelevanceResult.model_validate_json(raw)
        except (ReasoningError, ValidationError) as e:
            logger.error("Failed to analyze page", extra={"url": page.url, "title": page.title, "error": str(e)})
            return None

        logger.debug("Page analyzed", extra={"url": page.url, "relevance": result.relevance})
        if not result.relevance or not result.answer.strip():
            return None
        return result.answer.strip()

    async def reduce(self, text: str, topic: str, policy: str) -> str:
        """Compress ``text`` into one organized section about ``topic``.

        Raises:
            ReasoningError: When the engine call fails or its answer is not a compilation.
        """

        prompt = (
            f"{COMPILATION_PROMPT}\n\n"
            f"<information_topic>{topic}</information_topic>\n"
            f"<search_results>{text}</search_results>\n"
            f"<compilation_policy>{policy}</compilation_policy>"
        )
        raw = await self._llm.complete(
            prompt,
            model=self._settings.completion_model,
            max_tokens=self._settings.completion_max_tokens,
            system_prompt=RESEARCHER_SYSTEM_PROMPT,
            temperature=EXTRACTION_TEMPERATURE,
            response_schema=CompilationResult,
            timeout_s=self._settings.completion_timeout_s,
        )
        try:
            result = CompilationResult.model_validate_json(raw)
        except ValidationError as e:
            raise ReasoningError(f"invalid compilation: {e}") from e

        logger.info("Findings compiled", extra={"topic": topic, "chars": len(result.compilation)})
        return result.compilation

    async def fold(self, text: str, topic: str, policy: str) -> str:
        """Like :meth:`reduce`, but a failure becomes a placeholder section."""

        try:
            return await self.reduce(text, topic, policy)
        except ReasoningError as e:
            logger.error("Failed to compile findings", extra={"topic": topic, "error": str(e)})
            return failed_compilation(topic, e)

    async def compile_results(self, pages: Sequence[Page], topic: str, instructions: str) -> str:
        """Extract from ``pages`` and fold the relevant findings into one section."""

        logger.info("Compiling results", extra={"topic": topic, "pages": len(pages)})
        findings = await self.extract_relevant(pages, topic, instructions)
        if not findings.strip():
            return no_findings(topic)
        return await self.fold(findings, topic, instructions)

    async def final_report(self, findings: str, request: str, outline: str, policy: str) -> str:
        """Write the report for ``request`` from the accumulated findings.

        Raises:
            ReasoningError: When the engine call fails.
        """

        prompt = (
            f"{FINAL_REPORT_PROMPT}\n\n"
            f"<information_request>{request}</information_request>\n"
            f"<plan>{outline}</plan>\n"
            f"<findings>{findings}</findings>\n"
            f"<instructions>{policy}</instructions>"
        )
        report = await self._llm.complete(
            prompt,
            model=self._settings.reasoning_model,
            max_tokens=self._settings.reasoning_max_tokens,
            temperature=self._settings.reasoning_temperature,
            timeout_s=self._settings.reasoning_timeout_s,
        )
        logger.info("Report written", extra={"chars": len(report)})
        return report
