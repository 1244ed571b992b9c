"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest
import structlog


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _clear_lotw_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate tests from exporter settings in the host environment."""
    for name in (
        "LOTW_USERNAME",
        "LOTW_PASSWORD",
        "LOTW_REPORT_URL",
        "LOTW_FETCH_INTERVAL",
        "LOTW_FETCH_TIMEOUT",
        "LOTW_QSO_START_DATE",
        "LOTW_MAX_RECORD_CHARS",
        "LOTW_EXPORTER_LISTEN_ADDRESS",
        "LOTW_EXPORTER_PORT",
        "LOTW_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _silence_structlog() -> Iterator[None]:
    """Route structlog events nowhere so tests can capture them explicitly."""
    structlog.configure(
        processors=[],
        logger_factory=structlog.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()
