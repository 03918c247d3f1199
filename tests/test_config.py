"""Tests for settings loading and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from seek.config import load_settings
from seek.logging import configure_logging, get_logger, run_context


def test_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SEEK_ENV_FILE", raising=False)
    settings = load_settings()

    assert settings.reasoning_model == "o1-mini"
    assert settings.completion_model == "gpt-4o-mini"
    assert settings.webread_min_content_length == 128
    assert settings.webread_max_concurrency == 8
    assert settings.webread_deadline_s is None


def test_env_file_and_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    env_file = tmp_path / "seek.env"
    env_file.write_text("SEEK_SEARCH_PROVIDER=google\nSEEK_WEBREAD_TIMEOUT_S=3\n", encoding="utf-8")
    monkeypatch.setenv("SEEK_ENV_FILE", str(env_file))
    monkeypatch.setenv("SEEK_BROWSER_ENABLED", "false")

    settings = load_settings()

    assert settings.search_provider == "google"
    assert settings.webread_timeout_s == 3
    assert settings.browser_enabled is False


def test_run_context_is_logged(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "seek.log"
    configure_logging("INFO", log_file)
    configure_logging("INFO", log_file)

    root = logging.getLogger()
    file_handlers = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    assert len([h for h in file_handlers if h.baseFilename == str(log_file.resolve())]) == 1

    with run_context(run_id="abc123", step="plan"):
        get_logger("seek.test").info("hello")
    for handler in file_handlers:
        handler.flush()

    assert "run=abc123 step=plan seek.test: hello" in log_file.read_text(encoding="utf-8")

    for handler in file_handlers:
        root.removeHandler(handler)
        handler.close()
