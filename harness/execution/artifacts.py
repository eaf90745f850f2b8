"""
Diagnostic capture for failing tests.

Writes the page markup to the session log and a screenshot to
``{output_dir}/selenium-screenshots/{class}-{test}.png``. Capture is purely
diagnostic: it never raises, so it can neither fail a test nor hide the
failure that triggered it.
"""

import hashlib
from pathlib import Path
from typing import Optional

from ..core.config import Config
from ..core.exceptions import CaptureError
from ..core.logging_config import get_logger
from .models import ArtifactLocation, TestIdentity


class FailureArtifactCapturer:
    """Collects the page markup and a screenshot when a test fails."""

    def __init__(self, driver, config: Config):
        """
        Initialize the capturer.

        Args:
            driver: BrowserDriver of the failing test's session
            config: Configuration holding the output directory
        """
        self.driver = driver
        self.config = config
        self.logger = get_logger(__name__)

    def screenshot_path(self, identity: TestIdentity) -> Path:
        """Deterministic screenshot location; reruns overwrite it."""
        return self.config.screenshots_dir / f"{identity.file_stem}.png"

    def capture(self, identity: TestIdentity) -> Optional[ArtifactLocation]:
        """
        Capture diagnostics for a failing test.

        Args:
            identity: The failing test

        Returns:
            Location of the screenshot, or None if capture failed
        """
        try:
            return self._capture(identity)
        except Exception as e:
            self.logger.error(
                f"Failed to capture diagnostics for test [{identity}]: {e}",
                exc_info=True,
                extra={"metadata": {"test_name": str(identity)}},
            )
            return None

    def _capture(self, identity: TestIdentity) -> ArtifactLocation:
        # The driver logs the markup it returns; the value itself is not needed
        self.driver.get_page_markup()

        screenshots_dir = self.config.screenshots_dir
        screenshots_dir.mkdir(parents=True, exist_ok=True)
        screenshot_file = self.screenshot_path(identity).resolve()

        image = self.driver.capture_screenshot()
        if not image:
            raise CaptureError(
                "Driver returned an empty screenshot",
                test_name=str(identity),
                file_path=str(screenshot_file),
            )
        screenshot_file.write_bytes(image)

        location = ArtifactLocation(
            identity=identity,
            file_path=str(screenshot_file),
            file_size=len(image),
            checksum=hashlib.sha256(image).hexdigest(),
        )
        self.logger.error(
            location.message,
            extra={
                "metadata": {
                    "test_name": str(identity),
                    "file_path": location.file_path,
                    "file_size": location.file_size,
                }
            },
        )
        return location
