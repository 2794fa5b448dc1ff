from __future__ import annotations

from threading import RLock
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from resolver_engine.models.result import ProcessedResult
from resolver_engine.models.types import ResultStatus, UpdateOutcome


class ResultHistory:
    """
    Ordered log of processing outcomes.

    - append-only (a duplicate id is a caller defect -> ValueError)
    - each entry is replaced in place at most once, at the same position
    - observers get tuple snapshots; only the scheduler mutates
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._entries: List[ProcessedResult] = []
        self._index: Dict[str, int] = {}

    def append(self, result: ProcessedResult) -> None:
        with self._lock:
            if result.id in self._index:
                raise ValueError(f"ResultHistory already contains id: {result.id}")
            self._index[result.id] = len(self._entries)
            self._entries.append(result)

    def update_by_id(
        self,
        result_id: str,
        *,
        output: Optional[Mapping[str, Any]],
        logs: Sequence[str],
        duration_ms: float,
        status: ResultStatus,
    ) -> UpdateOutcome:
        with self._lock:
            pos = self._index.get(result_id)
            if pos is None:
                return UpdateOutcome.NOT_FOUND

            current = self._entries[pos]
            if current.is_terminal:
                return UpdateOutcome.ALREADY_TERMINAL

            self._entries[pos] = current.with_outcome(
                output=output,
                logs=logs,
                duration_ms=duration_ms,
                status=status,
            )
            return UpdateOutcome.UPDATED

    def get(self, result_id: str) -> Optional[ProcessedResult]:
        with self._lock:
            pos = self._index.get(result_id)
            return None if pos is None else self._entries[pos]

    def latest(self) -> Optional[ProcessedResult]:
        with self._lock:
            return self._entries[-1] if self._entries else None

    def snapshot(self) -> Tuple[ProcessedResult, ...]:
        with self._lock:
            return tuple(self._entries)

    def ids(self) -> Tuple[str, ...]:
        return tuple(r.id for r in self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[ProcessedResult]:
        return iter(self.snapshot())
