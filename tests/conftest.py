"""
Pytest configuration and shared fixtures for harness tests.

Provides a temporary configuration, a mock browser driver and a fake clock
so polling can be tested without waiting.
"""

import logging
from unittest.mock import MagicMock

import pytest

from harness.browser.driver import BrowserDriver
from harness.core.config import Config
from harness.core.logging_config import StructuredFormatter, TextFormatter
from harness.session.context import SessionContext

PAGE_URL = "http://localhost:8080/xwiki/bin/view/Sandbox/WebHome"


class FakeClock:
    """Monotonic clock that only moves when the poller sleeps."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep CI and harness environment variables out of unit tests."""
    monkeypatch.delenv("CI", raising=False)
    for name in (
        "HARNESS_HEADLESS",
        "HARNESS_BASE_URL",
        "HARNESS_OUTPUT_DIR",
        "HARNESS_LOG_LEVEL",
        "HARNESS_POLL_TIMEOUT_MS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def restore_root_logger():
    """Undo handler and level changes made by setup_logging."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        if isinstance(handler.formatter, (TextFormatter, StructuredFormatter)):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)


@pytest.fixture
def temp_config(tmp_path):
    """Create a temporary configuration for testing."""
    config = Config(
        output_dir=tmp_path / "target",
        logs_dir=tmp_path / "logs",
    )
    config.ci_mode = False
    config.headless_mode = True
    return config


@pytest.fixture
def mock_driver():
    """Browser driver mock sitting on an ordinary wiki page."""
    driver = MagicMock(spec=BrowserDriver)
    driver.get_current_url.return_value = PAGE_URL
    driver.get_field_value.return_value = "abc123"
    driver.get_page_markup.return_value = "<html><body>Sandbox</body></html>"
    driver.capture_screenshot.return_value = b"\x89PNG\r\n\x1a\nfake-image"
    return driver


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def session(mock_driver, temp_config):
    """Session context around the mock driver."""
    return SessionContext.open(mock_driver, temp_config)
