"""Tests for the page writer."""

from __future__ import annotations

from pathlib import Path

import pytest

from seek.models.page import Page
from seek.recording.page_writer import PageWriter, slugify


@pytest.mark.parametrize(
    ("title", "url", "expected"),
    [
        ("Spain - Wikipedia", "https://en.wikipedia.org/wiki/Spain", "spain-wikipedia.md"),
        ("  ", "https://example.com/blog/My_Post/", "my_post.md"),
        (None, "https://example.com/", "example-com.md"),
        ("¿Qué pasa? ¡Nada!", "u", "qu-pasa-nada.md"),
        ("!!!", "u", "untitled.md"),
        ("a" * 150, "u", "a" * 100 + ".md"),
    ],
)
def test_slugify(title, url, expected) -> None:
    assert slugify(title, url) == expected


def test_save_pages_and_report(tmp_path: Path) -> None:
    writer = PageWriter(tmp_path / "out")
    paths = writer.save_pages(
        [
            Page(url="https://example.com/a", title="First Page", content="# First\nbody"),
            Page(url="https://example.com/b", title=None, content="second"),
        ]
    )

    assert [p.name for p in paths] == ["first-page.md", "b.md"]
    assert paths[0].read_text(encoding="utf-8") == "# First\nbody"

    report = writer.save_report("# Report")
    assert report == tmp_path / "out" / "report.md"
    assert report.read_text(encoding="utf-8") == "# Report"
