from __future__ import annotations

from collections import deque
from threading import RLock
from typing import Deque, Iterable, Optional, Tuple

from resolver_engine.models.input_data import InputData


class InputQueue:
    """
    FIFO backlog of unprocessed InputData.

    Single consumer (the scheduler). Observers read via snapshot().
    """

    def __init__(self, items: Iterable[InputData] = ()) -> None:
        self._lock = RLock()
        self._items: Deque[InputData] = deque()
        self.append(items)

    def append(self, items: Iterable[InputData]) -> int:
        """
        Append at the tail, preserving argument order. Returns how many were added.
        """
        batch = list(items)
        for it in batch:
            if not isinstance(it, InputData):
                raise TypeError(f"InputQueue accepts InputData, got {type(it).__name__}")
        with self._lock:
            self._items.extend(batch)
        return len(batch)

    def dequeue_head(self) -> Optional[InputData]:
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def length(self) -> int:
        with self._lock:
            return len(self._items)

    def __len__(self) -> int:
        return self.length()

    def __bool__(self) -> bool:
        return self.length() > 0

    def snapshot(self) -> Tuple[InputData, ...]:
        with self._lock:
            return tuple(self._items)
