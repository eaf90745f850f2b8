"""Condition polling used to synchronize tests with the browser."""

from .poller import ConditionPoller, LIVE_TABLE_LOADED_LOCATOR

__all__ = [
    "ConditionPoller",
    "LIVE_TABLE_LOADED_LOCATOR",
]
