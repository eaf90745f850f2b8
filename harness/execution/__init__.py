"""
Test execution components for the browser test harness.

This module provides the controlled test run, failure artifact capture and
the suite runner that reports per-test results.
"""

from .artifacts import FailureArtifactCapturer
from .controller import TestRunController, combine
from .models import (
    ArtifactLocation,
    OutcomeKind,
    RunState,
    TestIdentity,
    TestOutcome,
    TestRunResult,
    TestStatus,
)
from .runner import SuiteRunner

__all__ = [
    "FailureArtifactCapturer",
    "TestRunController",
    "combine",
    "ArtifactLocation",
    "OutcomeKind",
    "RunState",
    "TestIdentity",
    "TestOutcome",
    "TestRunResult",
    "TestStatus",
    "SuiteRunner",
]
