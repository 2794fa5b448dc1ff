from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class PacingPolicy(Protocol):
    """
    Delay (seconds) between two processed items, given how many are still queued.

    Pacing exists for readability of the feed, never for correctness.
    """

    def delay_for(self, remaining: int) -> float:
        ...


@dataclass(frozen=True)
class FixedPacing:
    seconds: float = 2.5

    def __post_init__(self) -> None:
        if self.seconds < 0:
            raise ValueError("FixedPacing.seconds must be >= 0")

    def delay_for(self, remaining: int) -> float:
        return self.seconds


@dataclass(frozen=True)
class NoPacing:
    def delay_for(self, remaining: int) -> float:
        return 0.0


DEFAULT_PACING_SECONDS = 2.5
