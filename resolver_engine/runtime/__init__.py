"""
Runtime layer (queue, history, stats, scheduling).

Data models live in resolver_engine.models.
"""
from .queue import InputQueue
from .history import ResultHistory
from .stats import StatsAggregator, StatsSnapshot
from .pacing import FixedPacing, NoPacing, PacingPolicy
from .scheduler import (
    HistoryIntegrityError,
    ProcessingScheduler,
    SchedulerConfig,
    SchedulerEvent,
    SchedulerEventKind,
)

__all__ = [
    "InputQueue",
    "ResultHistory",
    "StatsAggregator",
    "StatsSnapshot",
    "FixedPacing",
    "NoPacing",
    "PacingPolicy",
    "HistoryIntegrityError",
    "ProcessingScheduler",
    "SchedulerConfig",
    "SchedulerEvent",
    "SchedulerEventKind",
]
