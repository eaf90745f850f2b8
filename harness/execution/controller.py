"""
Controlled execution of a single browser test.

Runs setup, the test body and teardown, capturing a screenshot between body
failure and teardown so the picture shows the real problem rather than the
cleaned-up page. The error surfaced to the caller follows fixed precedence:
a test body failure always wins over a teardown failure.
"""

from typing import Callable, List, Optional

from ..core.exceptions import HarnessError
from ..core.logging_config import get_logger
from .models import ArtifactLocation, OutcomeKind, RunState, TestIdentity, TestOutcome


def combine(
    test_error: Optional[BaseException],
    teardown_error: Optional[BaseException],
) -> TestOutcome:
    """
    Combine the body and teardown results of a run into one outcome.

    Args:
        test_error: Exception raised by the test body, if any
        teardown_error: Exception raised by teardown, if any

    Returns:
        Outcome whose primary error is the body error when there is one,
        otherwise the teardown error
    """
    if test_error is not None and teardown_error is not None:
        kind = OutcomeKind.BOTH
    elif test_error is not None:
        kind = OutcomeKind.TEST_FAILURE
    elif teardown_error is not None:
        kind = OutcomeKind.TEARDOWN_FAILURE
    else:
        kind = OutcomeKind.SUCCESS

    return TestOutcome(kind=kind, test_error=test_error, teardown_error=teardown_error)


class TestRunController:
    """
    State machine for one test run.

    IDLE -> SETTING_UP -> RUNNING -> [CAPTURING] -> TEARING_DOWN -> DONE.
    A setup failure goes straight to DONE without teardown.
    """

    def __init__(self, capturer=None):
        """
        Initialize the controller.

        Args:
            capturer: FailureArtifactCapturer invoked when the body fails
        """
        self.capturer = capturer
        self.logger = get_logger(__name__)
        self.state = RunState.IDLE
        self.transitions: List[RunState] = []
        self.last_outcome: Optional[TestOutcome] = None
        self.last_capture: Optional[ArtifactLocation] = None

    def _enter(self, state: RunState) -> None:
        self.state = state
        self.transitions.append(state)
        self.logger.debug(f"Test run state: {state.value}")

    def run_test(
        self,
        setup: Callable[[], None],
        body: Callable[[], None],
        teardown: Callable[[], None],
        identity: Optional[TestIdentity] = None,
    ) -> TestOutcome:
        """
        Run one test and raise its primary error.

        Args:
            setup: Fixture setup; a failure here skips body and teardown
            body: The test itself
            teardown: Cleanup, run whenever setup succeeded
            identity: Names used for the failure screenshot

        Returns:
            The outcome of a successful run

        Raises:
            The setup error, else the body error, else the teardown error
        """
        if self.state not in (RunState.IDLE, RunState.DONE):
            raise HarnessError(
                f"Test run already in progress (state: {self.state.value})",
                "RUN_IN_PROGRESS",
            )

        self.transitions = []
        self.last_outcome = None
        self.last_capture = None
        self._enter(RunState.SETTING_UP)
        try:
            setup()
        except BaseException as e:
            self.last_outcome = TestOutcome(kind=OutcomeKind.SETUP_FAILURE, setup_error=e)
            self._enter(RunState.DONE)
            raise

        test_error: Optional[BaseException] = None
        self._enter(RunState.RUNNING)
        try:
            body()
        except Exception as e:
            test_error = e
            self._enter(RunState.CAPTURING)
            self._capture(identity)
        except BaseException as e:
            # Interrupted (KeyboardInterrupt, SystemExit): no capture, still torn down
            test_error = e
            raise
        finally:
            self._tear_down(teardown, test_error, identity)

        self.last_outcome.raise_for_failure()
        return self.last_outcome

    def _tear_down(
        self,
        teardown: Callable[[], None],
        test_error: Optional[BaseException],
        identity: Optional[TestIdentity],
    ) -> None:
        self._enter(RunState.TEARING_DOWN)
        teardown_error: Optional[BaseException] = None
        try:
            teardown()
        except Exception as e:
            teardown_error = e
        except BaseException as e:
            teardown_error = e
            raise
        finally:
            self.last_outcome = combine(test_error, teardown_error)
            if self.last_outcome.kind == OutcomeKind.BOTH:
                self.logger.error(
                    f"Teardown also failed after test failure: {teardown_error}",
                    exc_info=(
                        type(teardown_error),
                        teardown_error,
                        teardown_error.__traceback__,
                    ),
                    extra={"metadata": {"test_name": str(identity) if identity else None}},
                )
            self._enter(RunState.DONE)

    def _capture(self, identity: Optional[TestIdentity]) -> None:
        """Run the capturer; nothing it raises may replace the body failure."""
        if self.capturer is None or identity is None:
            return
        try:
            self.last_capture = self.capturer.capture(identity)
        except Exception as e:
            self.logger.error(
                f"Failure capture raised for {identity}: {e}", exc_info=True
            )
