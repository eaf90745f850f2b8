"""
Data models for test execution and failure artifacts.

Defines Pydantic models for test identity, run outcomes, captured
screenshots and per-test results.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RunState(Enum):
    """States of one controlled test run."""

    IDLE = "idle"
    SETTING_UP = "setting_up"
    RUNNING = "running"
    CAPTURING = "capturing"
    TEARING_DOWN = "tearing_down"
    DONE = "done"


class OutcomeKind(Enum):
    """Which phases of a test run failed."""

    SUCCESS = "success"
    SETUP_FAILURE = "setup_failure"
    TEST_FAILURE = "test_failure"
    TEARDOWN_FAILURE = "teardown_failure"
    BOTH = "both"


class TestStatus(Enum):
    """Test execution status."""

    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


class TestIdentity(BaseModel):
    """Names identifying one test method."""

    model_config = ConfigDict(frozen=True)

    class_name: str = Field(..., description="Name of the test class")
    test_name: str = Field(..., description="Name of the test method")

    @field_validator("class_name", "test_name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Test identity names cannot be empty")
        return v.strip()

    @property
    def file_stem(self) -> str:
        """Base name of files written for this test."""
        return f"{self.class_name}-{self.test_name}"

    def __str__(self) -> str:
        return self.file_stem


class TestOutcome(BaseModel):
    """Tagged result of one test run, before anything is raised."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: OutcomeKind
    setup_error: Optional[BaseException] = None
    test_error: Optional[BaseException] = None
    teardown_error: Optional[BaseException] = None

    @property
    def is_success(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    @property
    def primary_error(self) -> Optional[BaseException]:
        """The error surfaced to the caller. A test error always wins."""
        if self.setup_error is not None:
            return self.setup_error
        if self.test_error is not None:
            return self.test_error
        return self.teardown_error

    def raise_for_failure(self) -> None:
        """Raise the primary error, if any."""
        error = self.primary_error
        if error is not None:
            raise error


class ArtifactLocation(BaseModel):
    """Where the screenshot of a failing test was written."""

    model_config = ConfigDict(extra="forbid")

    identity: TestIdentity = Field(..., description="Test the screenshot belongs to")
    file_path: str = Field(..., description="Absolute path of the screenshot")
    file_size: int = Field(..., ge=0, description="File size in bytes")
    checksum: Optional[str] = Field(None, description="SHA-256 of the file contents")
    created_at: datetime = Field(
        default_factory=datetime.utcnow, description="Creation timestamp"
    )
    mime_type: str = Field("image/png", description="MIME type of the file")

    @property
    def file_name(self) -> str:
        return Path(self.file_path).name

    @property
    def message(self) -> str:
        """Pointer logged next to the original failure."""
        return (
            f"Screenshot for failing test [{self.identity.file_stem}] "
            f"saved at [{self.file_path}]"
        )


class TestRunResult(BaseModel):
    """Result of one test method run by the suite runner."""

    model_config = ConfigDict(extra="forbid")

    identity: TestIdentity = Field(..., description="Test that was run")
    status: TestStatus = Field(..., description="Test execution status")
    duration: float = Field(..., ge=0, description="Execution duration in seconds")
    started_at: datetime = Field(..., description="Test start time")
    completed_at: datetime = Field(..., description="Test completion time")

    outcome_kind: OutcomeKind = Field(..., description="Phases that failed")
    error_message: Optional[str] = Field(None, description="Error message if failed")
    error_type: Optional[str] = Field(None, description="Error class name")
    stack_trace: Optional[str] = Field(None, description="Stack trace if available")
    screenshot: Optional[ArtifactLocation] = Field(
        None, description="Screenshot captured on failure"
    )

    @property
    def is_success(self) -> bool:
        return self.status == TestStatus.PASSED

    def to_summary(self) -> dict:
        """Create a summary dictionary for logging."""
        return {
            "test_name": str(self.identity),
            "status": self.status.value,
            "duration": self.duration,
            "outcome": self.outcome_kind.value,
            "has_error": bool(self.error_message),
            "screenshot": self.screenshot.file_path if self.screenshot else None,
        }
