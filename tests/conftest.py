from __future__ import annotations

import pytest

from seek.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        browser_enabled=False,
        webread_min_content_length=128,
        webread_max_concurrency=8,
        compile_max_concurrency=4,
    )
