"""Exception hierarchy.

Failures below the step level (one page, one tier, one extraction) are absorbed by the
pipeline; the errors raised to callers are refusal, planning and final-assembly failures.
"""

from __future__ import annotations


class SeekError(RuntimeError):
    """Base class for all seek errors."""


class PlanRefusedError(SeekError):
    """The planner refused the request."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class PlanningError(SeekError):
    """The planner failed or produced an unusable plan."""


class ExecutionError(SeekError):
    """A plan could not be turned into a report."""


class ReasoningError(SeekError):
    """A single reasoning engine call failed."""


class WebSearchError(SeekError):
    """A search provider call failed."""


class TavilySearchError(WebSearchError):
    pass


class GoogleSearchError(WebSearchError):
    pass


class FetchError(SeekError):
    """A page source could not produce a page for a URL."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


class UnsupportedContentError(FetchError):
    """The URL or response is not an HTML document."""


class ContentTooShortError(FetchError):
    """The page was fetched but carries less text than required."""
