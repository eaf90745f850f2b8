"""
Base exception classes for the browser test harness.

Provides a hierarchy of exceptions for the errors the harness itself raises.
Failures raised by test setup, test bodies and teardown are never wrapped:
they reach the caller unchanged.
"""

from typing import Optional, Dict, Any


class HarnessError(Exception):
    """Base exception class for all harness errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
        }


class ConditionTimeoutError(HarnessError, TimeoutError):
    """Raised when a polled condition did not become true in time."""

    def __init__(
        self,
        message: str,
        timeout_ms: Optional[int] = None,
        elapsed_ms: Optional[float] = None,
    ):
        super().__init__(message, "WAIT_TIMEOUT")
        self.timeout_ms = timeout_ms
        self.elapsed_ms = elapsed_ms
        self.context.update(
            {
                "timeout_ms": timeout_ms,
                "elapsed_ms": elapsed_ms,
            }
        )


class CaptureError(HarnessError):
    """Raised inside the failure capturer. Never leaves it."""

    def __init__(
        self,
        message: str,
        test_name: Optional[str] = None,
        file_path: Optional[str] = None,
    ):
        super().__init__(message, "CAPTURE_FAILED")
        self.test_name = test_name
        self.file_path = file_path
        self.context.update(
            {
                "test_name": test_name,
                "file_path": file_path,
            }
        )


class DriverError(HarnessError):
    """Raised when the browser driver fails to perform an operation."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        locator: Optional[str] = None,
    ):
        super().__init__(message, "DRIVER_ERROR")
        self.method = method
        self.locator = locator
        self.context.update(
            {
                "method": method,
                "locator": locator,
            }
        )


class ValidationError(HarnessError):
    """Raised when validation fails."""

    def __init__(
        self,
        message: str,
        validation_type: Optional[str] = None,
        violations: Optional[list] = None,
    ):
        super().__init__(message, "VALIDATION_FAILED")
        self.validation_type = validation_type
        self.violations = violations or []
        self.context.update(
            {
                "validation_type": validation_type,
                "violations": violations,
            }
        )
