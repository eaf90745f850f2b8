"""
Bounded-time polling of browser state.

Test code synchronizes with asynchronous page rendering by repeatedly checking
a condition until it holds or a deadline passes. One generic primitive,
``ConditionPoller.wait_until``, plus thin named waits built on it.
"""

import time
from typing import Any, Callable, Optional

from ..browser.driver import NativeConditionWaiter
from ..core.config import DEFAULT_POLL_INTERVAL_MS, DEFAULT_POLL_TIMEOUT_MS, Config
from ..core.exceptions import ConditionTimeoutError
from ..core.logging_config import get_logger

LIVE_TABLE_LOADED_LOCATOR = (
    "//*[@id='{table_id}-ajax-loader' and @class='xwiki-livetable-loader hidden']"
)


class ConditionPoller:
    """
    Polls predicates against a browser driver.

    Polling is strictly sequential and runs on the calling thread. Errors raised
    by a predicate are not retried: they propagate out of ``wait_until`` at once.
    """

    def __init__(
        self,
        driver,
        timeout_ms: int = DEFAULT_POLL_TIMEOUT_MS,
        interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        """
        Initialize the poller.

        Args:
            driver: BrowserDriver the named waits query
            timeout_ms: Default time budget of a wait
            interval_ms: Delay between two evaluations
            clock: Monotonic clock returning seconds
            sleep: Function sleeping for the given seconds
        """
        self.driver = driver
        self.timeout_ms = timeout_ms
        self.interval_ms = interval_ms
        self._clock = clock
        self._sleep = sleep
        self.logger = get_logger(__name__)

    @classmethod
    def from_config(cls, driver, config: Config) -> "ConditionPoller":
        return cls(
            driver,
            timeout_ms=config.poll_timeout_ms,
            interval_ms=config.poll_interval_ms,
        )

    def wait_until(
        self,
        predicate: Callable[[], Any],
        timeout_ms: Optional[int] = None,
        message: str = "Condition not met",
    ) -> None:
        """
        Block until ``predicate()`` is truthy.

        Args:
            predicate: Zero-argument condition, evaluated at least once
            timeout_ms: Time budget; the poller default when None
            message: Text of the ConditionTimeoutError raised on timeout

        Raises:
            ConditionTimeoutError: the predicate stayed falsy for the whole budget
        """
        if timeout_ms is None:
            timeout_ms = self.timeout_ms
        interval = self.interval_ms / 1000.0
        start = self._clock()
        deadline = start + timeout_ms / 1000.0
        attempts = 0

        while True:
            attempts += 1
            if predicate():
                self.logger.debug(
                    f"Condition met after {attempts} attempt(s)",
                    extra={
                        "metadata": {
                            "attempts": attempts,
                            "duration": self._clock() - start,
                        }
                    },
                )
                return

            now = self._clock()
            if now >= deadline:
                elapsed_ms = (now - start) * 1000.0
                self.logger.debug(
                    f"Condition timed out: {message}",
                    extra={
                        "metadata": {
                            "attempts": attempts,
                            "timeout_ms": timeout_ms,
                            "elapsed_ms": elapsed_ms,
                        }
                    },
                )
                raise ConditionTimeoutError(
                    message, timeout_ms=timeout_ms, elapsed_ms=elapsed_ms
                )

            self._sleep(min(interval, deadline - now))

    def wait_for_text_equals(
        self, locator: str, expected: str, timeout_ms: Optional[int] = None
    ) -> None:
        """Wait until the element's text equals ``expected``."""
        if self.driver.is_present(locator):
            message = (
                f"Element [{locator}] found but it doesn't have the expected value "
                f"[{expected}]"
            )
        else:
            message = f"Element [{locator}] not found"

        self.wait_until(
            lambda: self.driver.find_text(locator) == expected, timeout_ms, message
        )

    def wait_for_text_contains(
        self, locator: str, value: str, timeout_ms: Optional[int] = None
    ) -> None:
        """Wait until the element's text contains ``value``."""
        if self.driver.is_present(locator):
            message = (
                f"Element [{locator}] found but it doesn't contain the expected value "
                f"[{value}]"
            )
        else:
            message = f"Element [{locator}] not found"

        def _contains() -> bool:
            text = self.driver.find_text(locator)
            return text is not None and value in text

        self.wait_until(_contains, timeout_ms, message)

    def wait_for_body_contains(self, value: str, timeout_ms: Optional[int] = None) -> None:
        self.wait_until(
            lambda: self.driver.is_text_present_on_page(value),
            timeout_ms,
            f"Body text doesn't contain the value [{value}]",
        )

    def wait_for_element(self, locator: str, timeout_ms: Optional[int] = None) -> None:
        self.wait_until(
            lambda: self.driver.is_present(locator),
            timeout_ms,
            f"Element [{locator}] not found",
        )

    def wait_for_condition(self, script: str, timeout_ms: Optional[int] = None) -> None:
        """
        Wait until a JavaScript expression evaluates truthy in the page.

        Drivers that poll scripts natively do the waiting themselves.
        """
        if timeout_ms is None:
            timeout_ms = self.timeout_ms

        if isinstance(self.driver, NativeConditionWaiter):
            self.driver.wait_for_condition(script, timeout_ms)
            return

        self.wait_until(
            lambda: bool(self.driver.evaluate_script(script)),
            timeout_ms,
            f"Condition [{script}] was not satisfied",
        )

    def wait_for_alert(self, timeout_ms: Optional[int] = None) -> None:
        """Wait until an alert is open. The driver can then accept it."""
        self.wait_until(
            self.driver.is_alert_present, timeout_ms, "The alert didn't appear."
        )

    def wait_for_confirmation(self, timeout_ms: Optional[int] = None) -> None:
        """Wait until a confirmation dialog is open."""
        self.wait_until(
            self.driver.is_confirmation_present,
            timeout_ms,
            "The confirmation didn't appear.",
        )

    def wait_for_live_table(self, table_id: str, timeout_ms: Optional[int] = None) -> None:
        """Wait for a live table's loader to be hidden."""
        self.wait_for_element(LIVE_TABLE_LOADED_LOCATOR.format(table_id=table_id), timeout_ms)
