"""
Runs every test method of a BrowserTest subclass against one session.

Each method gets a fresh test instance and controller. Failures are recorded
as results instead of propagating, and a summary is logged at the end.
"""

import time
import traceback
from datetime import datetime
from typing import List, Optional, Type

from ..core.logging_config import get_logger, log_performance
from ..session.context import SessionContext
from .models import OutcomeKind, TestRunResult, TestStatus


class SuiteRunner:
    """Executes test classes and collects per-method results."""

    def __init__(self, session: SessionContext, authenticator=None, run_id: Optional[str] = None):
        """
        Initialize the suite runner.

        Args:
            session: Browser session shared by all tests of the suite
            authenticator: Login/logout steps handed to each test instance
            run_id: Identifier used for log correlation
        """
        self.session = session
        self.authenticator = authenticator
        self.run_id = run_id or f"run_{int(time.time())}"
        self.logger = get_logger(__name__, run_id=self.run_id)

    def run_one(self, test_class: Type, test_name: str) -> TestRunResult:
        """Run a single test method and convert its outcome into a result."""
        test = test_class(self.session, authenticator=self.authenticator)
        identity = test.identity(test_name)

        start_time = time.time()
        started_at = datetime.utcnow()
        error: Optional[BaseException] = None
        try:
            test.run(test_name)
        except Exception as e:
            error = e

        duration = time.time() - start_time
        controller = test.controller
        outcome = controller.last_outcome if controller else None
        outcome_kind = outcome.kind if outcome else OutcomeKind.SETUP_FAILURE

        if error is None:
            status = TestStatus.PASSED
        elif isinstance(error, AssertionError) and outcome_kind in (
            OutcomeKind.TEST_FAILURE,
            OutcomeKind.BOTH,
        ):
            status = TestStatus.FAILED
        else:
            status = TestStatus.ERROR

        result = TestRunResult(
            identity=identity,
            status=status,
            duration=duration,
            started_at=started_at,
            completed_at=datetime.utcnow(),
            outcome_kind=outcome_kind,
            error_message=str(error) if error is not None else None,
            error_type=type(error).__name__ if error is not None else None,
            stack_trace=(
                "".join(traceback.format_exception(type(error), error, error.__traceback__))
                if error is not None
                else None
            ),
            screenshot=controller.last_capture if controller else None,
        )

        self.logger.info(
            f"Test completed: {identity} - {status.value}",
            extra={"metadata": result.to_summary()},
        )
        return result

    def run(self, test_class: Type, test_names: Optional[List[str]] = None) -> List[TestRunResult]:
        """
        Run the given methods of ``test_class``, all ``test_*`` methods by default.

        Args:
            test_class: BrowserTest subclass
            test_names: Subset of method names to run

        Returns:
            One result per test method, in execution order
        """
        names = test_names if test_names is not None else test_class.collect_test_names()

        self.logger.info(
            f"Starting execution of {len(names)} tests from {test_class.__name__}",
            extra={"metadata": {"test_count": len(names), "run_id": self.run_id}},
        )

        start_time = time.time()
        results = [self.run_one(test_class, name) for name in names]

        passed = sum(1 for r in results if r.status == TestStatus.PASSED)
        failed = sum(1 for r in results if r.status == TestStatus.FAILED)
        errors = sum(1 for r in results if r.status == TestStatus.ERROR)

        self.logger.info(
            f"Test execution completed: {passed} passed, {failed} failed, {errors} errors",
            extra={
                "metadata": {
                    "total_tests": len(results),
                    "passed": passed,
                    "failed": failed,
                    "errors": errors,
                    "run_id": self.run_id,
                }
            },
        )
        log_performance(
            self.logger,
            f"suite_{test_class.__name__}",
            time.time() - start_time,
            test_count=len(results),
        )
        return results
