"""Test configuration and fixtures for log scrubber tests."""

import os

import pytest
from rich.console import Console

from logscrubber.core.constants import CONFIG_ENV_VAR
from logscrubber.core.processor import LineProcessor
from logscrubber.core.session import ScrubberSession


@pytest.fixture
def mock_console():
    """Provide a console that doesn't output to stdout/stderr."""
    null_file = open(os.devnull, "w")
    yield Console(file=null_file, stderr=False)
    null_file.close()


@pytest.fixture
def make_processor():
    """Build a LineProcessor over a fresh session at the requested level."""

    def _make(level: int = 1, **kwargs) -> LineProcessor:
        return LineProcessor(ScrubberSession(level, **kwargs))

    return _make


@pytest.fixture
def sample_log_lines():
    """A small mixed JSON / plain-text log."""
    return [
        '{"level":"info","msg":"login","user":"alice","email":"alice@corp.com","ip":"10.0.0.7"}',
        "",
        "plain text line from 192.168.0.12 by bob@partner.org",
        '{"level":"debug","msg":"post created","user_id":"k7s9dd3qxfgbtrq1u8z1wsw3ua","user":"ALICE"}',
        "   ",
        '{"msg":"invite","email":"Alice@Corp.com"}',
    ]


@pytest.fixture
def sample_log_file(tmp_path, sample_log_lines):
    """Write the sample log to a temporary file and return its path."""
    path = tmp_path / "mattermost.log"
    path.write_text("\n".join(sample_log_lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run from an empty directory with no config file override."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# Configure test discovery
def pytest_configure(config):
    """Configure pytest settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
