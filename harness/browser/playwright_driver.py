"""
BrowserDriver adapter over Playwright's sync API.

Wraps a single Playwright page. Every call is timed and logged at DEBUG level,
so the session log doubles as the record of what the browser was asked to do
(including the page markup fetched when a failure is captured).
"""

import time
from typing import Any, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from ..core.config import Config
from ..core.exceptions import ConditionTimeoutError, DriverError
from ..core.logging_config import get_logger, log_driver_call


class PlaywrightDriver:
    """
    Implements the harness driver capabilities on top of a Playwright page.

    Dialogs are recorded instead of auto-dismissed so tests can poll for an
    alert or a confirmation and then accept or dismiss it explicitly.
    """

    def __init__(self, page, config: Config):
        """
        Initialize the driver.

        Args:
            page: playwright.sync_api.Page to drive
            config: Harness configuration (base URL, timeouts)
        """
        self.page = page
        self.config = config
        self.logger = get_logger(__name__)

        self._pending_dialogs: List[Any] = []
        self._playwright = None
        self._browser = None

        self.page.on("dialog", self._on_dialog)

    @classmethod
    def launch(cls, config: Config) -> "PlaywrightDriver":
        """Start Playwright, a Chromium browser and a fresh page."""
        playwright = sync_playwright().start()
        try:
            browser = playwright.chromium.launch(
                headless=config.get_effective_headless_mode()
            )
            page = browser.new_page()
        except PlaywrightError as e:
            playwright.stop()
            raise DriverError(f"Failed to launch browser: {e}", method="launch") from e

        driver = cls(page, config)
        driver._playwright = playwright
        driver._browser = browser
        driver.logger.info(
            "Browser launched",
            extra={"metadata": {"headless": config.get_effective_headless_mode()}},
        )
        return driver

    def close(self) -> None:
        """Close the browser and stop Playwright if this driver launched them."""
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None

    def __enter__(self) -> "PlaywrightDriver":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _on_dialog(self, dialog) -> None:
        self.logger.debug(f"Dialog opened: {dialog.type} - {dialog.message}")
        self._pending_dialogs.append(dialog)

    def _call(self, method: str, func, *args, locator: Optional[str] = None):
        """Run a Playwright call, logging it and converting its errors."""
        start_time = time.monotonic()
        try:
            result = func(*args)
        except PlaywrightError as e:
            log_driver_call(
                self.logger,
                method,
                time.monotonic() - start_time,
                False,
                locator=locator,
                error=str(e),
            )
            raise DriverError(str(e), method=method, locator=locator) from e

        log_driver_call(
            self.logger, method, time.monotonic() - start_time, True, locator=locator
        )
        return result

    def navigate(self, url: str) -> None:
        target = self.config.resolve_url(url)
        self._call("navigate", self.page.goto, target, locator=target)

    def get_current_url(self) -> str:
        return self.page.url

    def wait_for_load(self, timeout_ms: int) -> None:
        self._call(
            "wait_for_load",
            lambda: self.page.wait_for_load_state("load", timeout=timeout_ms),
        )

    def find_text(self, locator: str) -> Optional[str]:
        def _text():
            element = self.page.locator(locator)
            if element.count() == 0:
                return None
            return element.first.inner_text()

        return self._call("find_text", _text, locator=locator)

    def is_present(self, locator: str) -> bool:
        return self._call(
            "is_present", lambda: self.page.locator(locator).count() > 0, locator=locator
        )

    def is_text_present_on_page(self, text: str) -> bool:
        return text in self._call("get_body_text", lambda: self.page.inner_text("body"))

    def get_field_value(self, locator: str) -> Optional[str]:
        def _value():
            element = self.page.locator(locator)
            if element.count() == 0:
                return None
            return element.first.get_attribute("value")

        return self._call("get_field_value", _value, locator=locator)

    def click(self, locator: str) -> None:
        self._call("click", lambda: self.page.click(locator), locator=locator)

    def type(self, locator: str, text: str) -> None:
        self._call("type", lambda: self.page.fill(locator, text), locator=locator)

    def set_checked(self, locator: str) -> None:
        self._call("set_checked", lambda: self.page.check(locator), locator=locator)

    def evaluate_script(self, expression: str) -> Any:
        return self._call("evaluate_script", self.page.evaluate, expression)

    def wait_for_condition(self, script: str, timeout_ms: int) -> None:
        """Let Playwright poll the script in the page."""
        try:
            self._call(
                "wait_for_condition",
                lambda: self.page.wait_for_function(script, timeout=timeout_ms),
            )
        except DriverError as e:
            if isinstance(e.__cause__, PlaywrightTimeoutError):
                raise ConditionTimeoutError(
                    f"Condition [{script}] was not satisfied", timeout_ms=timeout_ms
                ) from e
            raise

    def _has_dialog(self, dialog_type: str) -> bool:
        # The sync API dispatches events only during a Playwright call; a
        # zero-length wait lets a dialog opened since the last call reach _on_dialog
        self._call("dispatch_events", lambda: self.page.wait_for_timeout(0))
        return any(d.type == dialog_type for d in self._pending_dialogs)

    def is_alert_present(self) -> bool:
        return self._has_dialog("alert")

    def is_confirmation_present(self) -> bool:
        return self._has_dialog("confirm")

    def accept_dialog(self) -> Optional[str]:
        """Accept the oldest pending dialog and return its message."""
        if not self._pending_dialogs:
            return None
        dialog = self._pending_dialogs.pop(0)
        self._call("accept_dialog", dialog.accept)
        return dialog.message

    def dismiss_dialog(self) -> Optional[str]:
        """Dismiss the oldest pending dialog and return its message."""
        if not self._pending_dialogs:
            return None
        dialog = self._pending_dialogs.pop(0)
        self._call("dismiss_dialog", dialog.dismiss)
        return dialog.message

    def capture_screenshot(self) -> bytes:
        return self._call(
            "capture_screenshot", lambda: self.page.screenshot(full_page=True)
        )

    def get_page_markup(self) -> str:
        markup = self._call("get_page_markup", self.page.content)
        self.logger.debug(
            "Page markup captured",
            extra={"metadata": {"url": self.page.url, "markup": markup}},
        )
        return markup
