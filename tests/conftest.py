"""
Pytest configuration and shared fixtures for bookmark archiver tests.

This module provides common fixtures, mocks, and test utilities that are
shared across multiple test modules.
"""

from pathlib import Path
from typing import Callable, Dict, Iterable, Optional
from unittest.mock import Mock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

# ============================================================================
# Pytest Configuration
# ============================================================================

ENV_VARS = ["BOOKMARK_FILE", "BOOKMARK_LOG_LEVEL"]


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: exercises several layers")


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch) -> Path:
    """Point HOME at an empty directory and clear bookmark env vars."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def store_path(tmp_path) -> Path:
    """Path of a backing file that does not exist yet."""
    return tmp_path / "bookmarks"


@pytest.fixture
def write_store(store_path) -> Callable[[str], Path]:
    """Write raw text to the backing file."""

    def _write(text: str) -> Path:
        store_path.write_bytes(text.encode("utf-8"))
        return store_path

    return _write


# ============================================================================
# HTTP Fixtures
# ============================================================================


def make_response(
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
    body: Iterable[bytes] = (b"<html></html>",),
    url: str = "http://example.com",
) -> Mock:
    """Build a streamed requests.Response stand-in."""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.headers = CaseInsensitiveDict(headers or {})
    response.url = url
    response.iter_content.return_value = iter(list(body))
    return response


@pytest.fixture
def fake_sleep() -> Mock:
    """Sleep replacement that records requested delays."""
    return Mock(name="sleep")


@pytest.fixture
def frozen_clock() -> Callable[[], float]:
    """Wall clock stuck at a fixed Unix time."""
    return lambda: 1_700_000_000.0
