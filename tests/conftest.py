"""Pytest configuration and fixtures."""

import logging
import textwrap
from pathlib import Path

import pytest

from statcheck.progress import Progress


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up statcheck loggers after each test to prevent name collisions."""
    yield

    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("statcheck")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


@pytest.fixture
def progress():
    return Progress()


@pytest.fixture
def stats_data():
    """Test data for a valid statistic test."""
    return {
        "type": "stats",
        "statistic": "requests.count",
        "name": "request budget",
        "operator": "<",
        "value": 50,
        "onFail": "warn",
    }


@pytest.fixture
def write_file(tmp_path):
    """Helper that writes dedented content to a file under tmp_path."""

    def _write(name: str, content: str) -> Path:
        p = tmp_path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(textwrap.dedent(content))
        return p

    return _write
