"""
Base class for browser acceptance tests.

Subclasses define ``test_*`` methods and optionally override ``set_up`` and
``tear_down``. Each method is run through a fresh ``TestRunController`` so a
failure leaves a screenshot behind without hiding the original error.
"""

from typing import List, Optional

from .core.exceptions import HarnessError
from .core.logging_config import get_logger
from .execution.artifacts import FailureArtifactCapturer
from .execution.controller import TestRunController
from .execution.models import TestIdentity, TestOutcome
from .session.context import SessionContext


class BrowserTest:
    """
    Acceptance test bound to one browser session.

    Login and logout helpers refresh the session's anti-CSRF token, which is
    the only thing that keeps the cached token in step with the logged-in user.
    """

    def __init__(self, session: SessionContext, authenticator=None):
        self.session = session
        self.authenticator = authenticator
        self.controller: Optional[TestRunController] = None
        self.current_test: Optional[str] = None
        self.logger = get_logger(f"{__name__}.{type(self).__name__}")

    @property
    def driver(self):
        return self.session.driver

    @property
    def poller(self):
        return self.session.poller

    @classmethod
    def collect_test_names(cls) -> List[str]:
        """Names of the ``test_*`` methods, sorted."""
        return [
            name
            for name in dir(cls)
            if name.startswith("test_") and callable(getattr(cls, name))
        ]

    def identity(self, test_name: str) -> TestIdentity:
        return TestIdentity(class_name=type(self).__name__, test_name=test_name)

    def run(self, test_name: str) -> TestOutcome:
        """Run one test method through the failure-capturing controller."""
        body = getattr(self, test_name)
        self.current_test = test_name
        self.controller = TestRunController(
            FailureArtifactCapturer(self.session.driver, self.session.config)
        )
        return self.controller.run_test(
            self.set_up, body, self.tear_down, self.identity(test_name)
        )

    def set_up(self) -> None:
        self.logger.info(f"Test: {self.current_test}")
        if not self.session.token_cache.is_cached:
            self.session.token_cache.recache()

    def tear_down(self) -> None:
        pass

    # Synchronization

    def wait_page(self) -> None:
        self.driver.wait_for_load(self.session.config.poll_timeout_ms)

    def wait_for_text_equals(self, locator: str, expected: str) -> None:
        self.poller.wait_for_text_equals(locator, expected)

    def wait_for_text_contains(self, locator: str, value: str) -> None:
        self.poller.wait_for_text_contains(locator, value)

    def wait_for_body_contains(self, value: str) -> None:
        self.poller.wait_for_body_contains(value)

    def wait_for_element(self, locator: str) -> None:
        self.poller.wait_for_element(locator)

    def wait_for_condition(self, script: str) -> None:
        self.poller.wait_for_condition(script)

    def wait_for_alert(self) -> None:
        self.poller.wait_for_alert()

    def wait_for_confirmation(self) -> None:
        self.poller.wait_for_confirmation()

    def wait_for_live_table(self, table_id: str) -> None:
        self.poller.wait_for_live_table(table_id)

    # Anti-CSRF token

    def recache_secret_token(self) -> None:
        self.session.token_cache.recache()

    def get_secret_token(self) -> str:
        return self.session.token_cache.get_token()

    # Authentication

    def _require_authenticator(self):
        if self.authenticator is None:
            raise HarnessError(
                f"No authenticator configured for {type(self).__name__}",
                "NO_AUTHENTICATOR",
            )
        return self.authenticator

    def login(self, username: str, password: str, remember_me: bool = False) -> None:
        self._require_authenticator().login(username, password, remember_me)
        self.recache_secret_token()

    def login_as_admin(self) -> None:
        self._require_authenticator().login_as_admin()
        self.recache_secret_token()

    def logout(self) -> None:
        self._require_authenticator().logout()
        self.recache_secret_token()
