from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Sequence, Tuple

from .input_data import InputData
from .types import ResultStatus


PLACEHOLDER_LOG = "Analyzing input sources..."


def _as_tuple(seq: Sequence[str]) -> Tuple[str, ...]:
    return tuple(str(s) for s in seq)


@dataclass(frozen=True)
class MergeResult:
    """
    What a MergeService hands back for one InputData.

    merged_profile is None when the merge failed; logs then carry the error text.
    """
    merged_profile: Optional[Mapping[str, Any]] = None
    logs: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "logs", _as_tuple(self.logs))
        if self.merged_profile is not None:
            object.__setattr__(self, "merged_profile", dict(self.merged_profile))

    @property
    def ok(self) -> bool:
        return self.merged_profile is not None

    @classmethod
    def failure(cls, message: str) -> "MergeResult":
        return cls(merged_profile=None, logs=(f"Error: {message}",))


@dataclass(frozen=True)
class ProcessedResult:
    """
    One entry of the result feed.

    Lifecycle: placeholder (status=processing) -> exactly one terminal transition.
    """
    id: str
    input: InputData
    output: Optional[Mapping[str, Any]] = None
    logs: Sequence[str] = field(default_factory=tuple)
    duration_ms: float = 0.0
    status: ResultStatus = ResultStatus.PROCESSING

    def __post_init__(self) -> None:
        object.__setattr__(self, "logs", _as_tuple(self.logs))
        if self.id != self.input.id:
            raise ValueError("ProcessedResult.id must equal input.id")

    @classmethod
    def placeholder(cls, item: InputData, *, log_line: str = PLACEHOLDER_LOG) -> "ProcessedResult":
        return cls(id=item.id, input=item, logs=(log_line,))

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    # -----------------------
    # Immutability helpers
    # -----------------------

    def with_outcome(
        self,
        *,
        output: Optional[Mapping[str, Any]],
        logs: Sequence[str],
        duration_ms: float,
        status: ResultStatus,
    ) -> "ProcessedResult":
        if not status.is_terminal:
            raise ValueError("with_outcome requires a terminal status")
        return replace(
            self,
            output=None if output is None else dict(output),
            logs=_as_tuple(logs),
            duration_ms=float(duration_ms),
            status=status,
        )
