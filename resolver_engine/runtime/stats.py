from __future__ import annotations

from dataclasses import dataclass
from threading import RLock


@dataclass(frozen=True)
class StatsSnapshot:
    processed_count: int = 0
    avg_latency_ms: float = 0.0
    last_latency_ms: float = 0.0

    def plus(self, duration_ms: float) -> "StatsSnapshot":
        """
        Fold one terminal transition in. Count and mean both derive from this
        snapshot's (pre-increment) count.
        """
        n = self.processed_count
        d = float(duration_ms)
        return StatsSnapshot(
            processed_count=n + 1,
            avg_latency_ms=(self.avg_latency_ms * n + d) / (n + 1),
            last_latency_ms=d,
        )


class StatsAggregator:
    """
    Running count + mean latency over terminal transitions.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._snap = StatsSnapshot()

    def record(self, duration_ms: float) -> StatsSnapshot:
        if duration_ms < 0:
            raise ValueError("duration_ms must be >= 0")
        with self._lock:
            self._snap = self._snap.plus(duration_ms)
            return self._snap

    def snapshot(self) -> StatsSnapshot:
        return self._snap

    @property
    def processed_count(self) -> int:
        return self._snap.processed_count

    @property
    def avg_latency_ms(self) -> float:
        return self._snap.avg_latency_ms

    @property
    def last_latency_ms(self) -> float:
        return self._snap.last_latency_ms
