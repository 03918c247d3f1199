"""Search-related models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """A single web search result item."""

    title: str | None = None
    snippet: str | None = None
    url: str
    source: str
    rank: int


class SearchOptions(BaseModel):
    """Search constraints.

    Providers silently ignore options they cannot express.

    Attributes:
        max_results: Maximum number of results.
        language: Language code, e.g. ``en``.
        date_restrict: Recency window: ``d1`` (day), ``w2`` (two weeks), ``m6``, ``y1``.
        include_domain: Only return results from this domain.
        exclude_domain: Drop results from this domain.
        country: Country code, e.g. ``us``.
        safe_search: Enable safe search filtering.
    """

    max_results: int = Field(default=5, ge=1, le=50)
    language: str | None = None
    date_restrict: str | None = Field(default=None, pattern=r"^[dwmy]\d+$")
    include_domain: str | None = None
    exclude_domain: str | None = None
    country: str | None = None
    safe_search: bool = True
