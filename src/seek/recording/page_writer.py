"""File-based page and report writer.

Writes one markdown file per page into an output directory.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from seek.logging import get_logger
from seek.models.page import Page

logger = get_logger(__name__)

_INVALID_CHARS = re.compile(r"[^a-z0-9\-_]")
_MULTIPLE_DASHES = re.compile(r"-+")
MAX_NAME_LENGTH = 100


def slugify(title: str | None, url: str) -> str:
    """Build a file name from a page title, or from the last URL segment without one."""

    name = (title or "").strip()
    if not name:
        parts = [p.strip() for p in url.rstrip("/").split("/")]
        name = next((p for p in reversed(parts) if p), "") or "untitled"

    name = _INVALID_CHARS.sub("-", name.lower())
    name = _MULTIPLE_DASHES.sub("-", name).strip("-")
    return (name[:MAX_NAME_LENGTH] or "untitled") + ".md"


@dataclass
class PageWriter:
    """Write pages and reports under ``output_dir``."""

    output_dir: Path

    def __post_init__(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def save_page(self, page: Page) -> Path:
        """Write one page; an existing file with the same name is overwritten."""

        path = self.output_dir / slugify(page.title, page.url)
        path.write_text(page.content, encoding="utf-8")
        logger.info("Saved page content", extra={"url": page.url, "path": str(path)})
        return path

    def save_pages(self, pages: list[Page]) -> list[Path]:
        saved: list[Path] = []
        for page in pages:
            try:
                saved.append(self.save_page(page))
            except OSError:
                logger.exception("Failed to save page", extra={"url": page.url})
        return saved

    def save_report(self, report: str, name: str = "report.md") -> Path:
        path = self.output_dir / name
        path.write_text(report, encoding="utf-8")
        logger.info("Saved report", extra={"path": str(path)})
        return path
