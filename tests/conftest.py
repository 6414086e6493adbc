"""
Shared pytest fixtures.

- Loader settings are rebuilt for every test from a clean ENVBIND_* env
- APP_TEST_* variables used by the tests never leak between tests
- write_dotenv writes a fallback file into the test's tmp_path
"""

import os
from pathlib import Path
from typing import Callable

import pytest

from envbind.config.settings import reset_settings

TEST_KEY_PREFIX = "APP_TEST_"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    for name in list(os.environ):
        if name.startswith("ENVBIND_") or name.startswith(TEST_KEY_PREFIX):
            monkeypatch.delenv(name)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def write_dotenv(tmp_path) -> Callable[..., Path]:
    def _write(content: str, name: str = ".env") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
