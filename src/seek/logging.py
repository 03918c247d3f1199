"""Logging utilities."""

from __future__ import annotations

import contextlib
import contextvars
import logging
from pathlib import Path
from typing import Any

from rich.logging import RichHandler


_run_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("seek_run_id", default="-")
_step_var: contextvars.ContextVar[str] = contextvars.ContextVar("seek_step", default="-")

_FORMAT = "%(asctime)s %(levelname)s run=%(run_id)s step=%(step)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _ContextFilter(logging.Filter):
    """Inject run context into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.run_id = _run_id_var.get()  # type: ignore[attr-defined]
        record.step = _step_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def run_context(*, run_id: str, step: str | None = None) -> Any:
    """Temporarily bind run context for structured logging.

    Args:
        run_id: Run identifier.
        step: Optional step identifier.
    """

    token_run = _run_id_var.set(run_id)
    token_step = _step_var.set(step or _step_var.get())
    try:
        yield
    finally:
        _run_id_var.reset(token_run)
        _step_var.reset(token_step)


def set_step(step: str) -> None:
    """Update current step in context."""

    _step_var.set(step)


def configure_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Configure application logging.

    Console output goes through rich on stderr. When ``log_file`` is given, records are
    also appended to that file with the same format.

    Args:
        level: Logging level name.
        log_file: Optional path of a log file.
    """

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Avoid duplicate handlers if configure_logging is called multiple times
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
        handler.addFilter(_ContextFilter())
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        target = str(log_file.resolve())
        if not any(
            isinstance(h, logging.FileHandler) and h.baseFilename == target for h in root.handlers
        ):
            file_handler = logging.FileHandler(target, encoding="utf-8")
            file_handler.addFilter(_ContextFilter())
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)


def log_exception(logger: logging.Logger, msg: str, **context: Any) -> None:
    """Log an exception with optional structured context."""

    if context:
        logger.exception("%s | context=%s", msg, context)
    else:
        logger.exception("%s", msg)
