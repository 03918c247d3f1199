"""Tests for JSON extraction from model output."""

from __future__ import annotations

from seek.utils.tags import extract_json_object, unwrap_fenced_block


def test_unwrap_json_fence() -> None:
    assert unwrap_fenced_block('```json\n{"a": 1}\n```') == '{"a": 1}'


def test_unwrap_plain_fence() -> None:
    assert unwrap_fenced_block('text\n```\n{"a": 1}\n```\nmore') == '{"a": 1}'


def test_unwrap_without_fence_returns_stripped_text() -> None:
    assert unwrap_fenced_block('  {"a": 1}  ') == '{"a": 1}'


def test_extract_json_object_from_prose() -> None:
    """It should find the first complete object embedded in prose."""

    text = 'Sure! The plan is {"approved": false, "reason": "no"} and that is all.'
    assert extract_json_object(text) == {"approved": False, "reason": "no"}


def test_extract_json_object_returns_none() -> None:
    assert extract_json_object("") is None
    assert extract_json_object("no json here") is None
    assert extract_json_object("[1, 2, 3]") is None
