"""Page models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Page(BaseModel):
    """Normalized text of one web page."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str | None = None
    content: str


class PageError(BaseModel):
    """A URL that could not be turned into a page."""

    model_config = ConfigDict(frozen=True)

    url: str
    error: str


class AcquisitionResult(BaseModel):
    """Outcome of reading a batch of URLs. Partial success is the normal case."""

    pages: list[Page] = Field(default_factory=list)
    errors: list[PageError] = Field(default_factory=list)

    def with_titles(self, titles: dict[str, str | None]) -> list[Page]:
        """Return pages, filling missing titles from a URL -> title mapping."""

        out: list[Page] = []
        for page in self.pages:
            if not page.title and titles.get(page.url):
                page = page.model_copy(update={"title": titles[page.url]})
            out.append(page)
        return out
