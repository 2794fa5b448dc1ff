from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


# ============================================================
# types.py (shared scalars + status taxonomies)
# ============================================================

def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex}"


class ResultStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not ResultStatus.PROCESSING


class NullOutputPolicy(str, Enum):
    """
    How a merge that produced no profile is recorded.

    Both policies treat the transition as terminal; it counts toward stats either way.
    """
    COMPLETED = "completed"
    FAILED = "failed"

    def status_for(self, output: object) -> ResultStatus:
        if output is None and self is NullOutputPolicy.FAILED:
            return ResultStatus.FAILED
        return ResultStatus.COMPLETED


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class StartOutcome(str, Enum):
    STARTED = "started"
    ALREADY_RUNNING = "already_running"
    EMPTY_QUEUE = "empty_queue"


class UpdateOutcome(str, Enum):
    UPDATED = "updated"
    NOT_FOUND = "not_found"
    ALREADY_TERMINAL = "already_terminal"
