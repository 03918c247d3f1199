"""Page parsing utilities.

Both page sources (plain HTTP and the browser) hand their markup to :class:`PageParser`, so a
page reads the same downstream whichever tier produced it.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from readability import Document

from seek.logging import get_logger
from seek.models.page import Page

logger = get_logger(__name__)

REMOVED_TAGS = (
    "header",
    "footer",
    "nav",
    "aside",
    "script",
    "style",
    "noscript",
    "head",
    "form",
    "select",
    "iframe",
    "svg",
    "template",
)

_HEADINGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
_BLOCK_TAGS = {
    "address", "article", "blockquote", "body", "dd", "details", "dialog", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "hr", "html", "main", "ol", "p", "pre", "section",
    "summary", "ul",
}
_WS_RE = re.compile(r"\s+")


def _squash(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


class PageParser:
    """Parse fetched HTML pages into normalized text."""

    def __init__(self, *, max_chars: int | None = None) -> None:
        self._max_chars = max_chars

    def parse(self, url: str, html: str, *, title: str | None = None) -> Page:
        """Parse HTML into a page.

        Args:
            url: Page URL.
            html: Raw markup.
            title: Title obtained elsewhere (e.g. from the browser); wins over the markup's.
        """

        soup = BeautifulSoup(html, "lxml")
        page_title = _squash(title) if title and title.strip() else self.extract_title(url, html, soup)

        self.clean(soup)
        text = self.to_text(soup)
        if self._max_chars is not None:
            text = self._truncate(text, max_chars=self._max_chars)

        return Page(url=url, title=page_title, content=text)

    @staticmethod
    def extract_title(url: str, html: str, soup: BeautifulSoup) -> str | None:
        """Title of the document, or ``None`` when it has none."""

        raw = soup.title.get_text(" ", strip=True) if soup.title else ""
        if not raw:
            return None
        try:
            short = Document(html).short_title()
        except Exception:
            logger.debug("readability could not shorten title for url=%s", url)
            short = ""
        return _squash(short or raw) or None

    @staticmethod
    def clean(soup: BeautifulSoup) -> None:
        """Remove non-content elements and comments in place."""

        for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
            comment.extract()
        for tag in soup.find_all(list(REMOVED_TAGS)):
            # nested matches are already gone with their ancestor
            if not tag.decomposed:
                tag.decompose()

    def to_text(self, soup: BeautifulSoup) -> str:
        """Convert a cleaned tree to normalized text.

        Headings become ``#`` lines, list items ``- `` lines and table rows ``| a | b |``
        lines; other blocks become plain lines. Blank lines are dropped.
        """

        parts: list[str] = []
        self._render(soup, parts)
        lines = (_squash(line) for line in "".join(parts).splitlines())
        return "\n".join(line for line in lines if line)

    def _render(self, node: Tag, parts: list[str]) -> None:
        for child in node.children:
            if isinstance(child, NavigableString):
                if not isinstance(child, Comment):
                    parts.append(str(child).replace("\n", " "))
                continue
            if not isinstance(child, Tag):
                continue

            name = child.name
            if name in _HEADINGS:
                text = child.get_text(" ", strip=True)
                if text:
                    parts.append(f"\n{'#' * _HEADINGS[name]} {text}\n")
            elif name == "li":
                text = child.get_text(" ", strip=True)
                if text:
                    parts.append(f"\n- {text}\n")
            elif name == "table":
                parts.append(self._render_table(child))
            elif name == "br":
                parts.append("\n")
            elif name in _BLOCK_TAGS:
                parts.append("\n")
                self._render(child, parts)
                parts.append("\n")
            else:
                self._render(child, parts)

    @staticmethod
    def _render_table(table: Tag) -> str:
        rows: list[list[str]] = []
        for tr in table.find_all("tr"):
            cells = [_squash(td.get_text(" ", strip=True)) for td in tr.find_all(["td", "th"])]
            if cells:
                rows.append(cells)
        if not rows:
            return "\n"

        columns = max(len(r) for r in rows)
        out = ["\n"]
        for i, row in enumerate(rows):
            out.append("| " + " | ".join(row) + " |\n")
            if i == 0:
                out.append("|" + " --- |" * columns + "\n")
        return "".join(out)

    @staticmethod
    def _truncate(text: str, *, max_chars: int) -> str:
        if len(text) <= max_chars:
            return text
        return text[:max_chars] + "\n\n[TRUNCATED]"
