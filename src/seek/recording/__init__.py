"""Writing pages and reports to files."""

from __future__ import annotations

from seek.recording.page_writer import PageWriter, slugify

__all__ = ["PageWriter", "slugify"]
