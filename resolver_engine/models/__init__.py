"""
Core data model.

InputData -> (merge) -> ProcessedResult
"""

from .types import (
    NullOutputPolicy,
    ResultStatus,
    SchedulerState,
    StartOutcome,
    UpdateOutcome,
    new_id,
    now_utc,
)

from .input_data import InputData
from .result import PLACEHOLDER_LOG, MergeResult, ProcessedResult

__all__ = [
    "NullOutputPolicy",
    "ResultStatus",
    "SchedulerState",
    "StartOutcome",
    "UpdateOutcome",
    "new_id",
    "now_utc",
    "InputData",
    "PLACEHOLDER_LOG",
    "MergeResult",
    "ProcessedResult",
]
