"""Batch edit reconciliation for rule assignments.

Flow:
1) open a session over a hierarchy snapshot
2) stage edits with ``set_rule`` / ``set_days``
3) ``save`` dispatches one update per staged edit and reconciles outcomes
"""

from __future__ import annotations

from .contracts import (
    NOTHING_SAVED_MESSAGE,
    UNEXPECTED_SAVE_ERROR_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    DisplayRow,
    ItemFailure,
    SaveReport,
    describe_failure,
)
from .session import BatchEditSession

__all__ = [
    "NOTHING_SAVED_MESSAGE",
    "UNEXPECTED_SAVE_ERROR_MESSAGE",
    "UNKNOWN_ERROR_MESSAGE",
    "BatchEditSession",
    "DisplayRow",
    "ItemFailure",
    "SaveReport",
    "describe_failure",
]
