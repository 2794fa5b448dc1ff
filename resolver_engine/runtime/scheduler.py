from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable, List, Mapping, Optional, Tuple

from resolver_engine.models.input_data import InputData
from resolver_engine.models.result import PLACEHOLDER_LOG, MergeResult, ProcessedResult
from resolver_engine.models.types import (
    NullOutputPolicy,
    SchedulerState,
    StartOutcome,
    UpdateOutcome,
)
from resolver_engine.runtime.history import ResultHistory
from resolver_engine.runtime.pacing import DEFAULT_PACING_SECONDS, FixedPacing, NoPacing, PacingPolicy
from resolver_engine.runtime.queue import InputQueue
from resolver_engine.runtime.stats import StatsAggregator, StatsSnapshot

if TYPE_CHECKING:
    from resolver_providers.protocol import MergeService

logger = logging.getLogger(__name__)


class HistoryIntegrityError(RuntimeError):
    """
    The drive loop could not write a terminal outcome back into its own placeholder.
    Only possible if something other than the scheduler mutated the history.
    """


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Scheduler runtime configuration.
    Keep small; merge behavior lives in the MergeService.
    """
    pacing: PacingPolicy = field(default_factory=lambda: FixedPacing(DEFAULT_PACING_SECONDS))
    null_output_policy: NullOutputPolicy = NullOutputPolicy.COMPLETED
    placeholder_log: str = PLACEHOLDER_LOG

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SchedulerConfig":
        """
        RESOLVER_PACING_SECONDS: float, 0 disables pacing
        RESOLVER_NULL_OUTPUT_POLICY: "completed" | "failed"
        """
        env = os.environ if environ is None else environ

        pacing: PacingPolicy = FixedPacing(DEFAULT_PACING_SECONDS)
        raw_pacing = (env.get("RESOLVER_PACING_SECONDS") or "").strip()
        if raw_pacing:
            seconds = float(raw_pacing)
            pacing = NoPacing() if seconds == 0 else FixedPacing(seconds)

        policy = NullOutputPolicy.COMPLETED
        raw_policy = (env.get("RESOLVER_NULL_OUTPUT_POLICY") or "").strip().lower()
        if raw_policy:
            policy = NullOutputPolicy(raw_policy)

        return cls(pacing=pacing, null_output_policy=policy)


class SchedulerEventKind(str, Enum):
    ENQUEUED = "enqueued"
    STARTED = "started"
    PLACEHOLDER = "placeholder"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"
    IDLE = "idle"


@dataclass(frozen=True)
class SchedulerEvent:
    kind: SchedulerEventKind
    state: SchedulerState
    result_id: Optional[str] = None
    queued: int = 0


SchedulerListener = Callable[[SchedulerEvent], None]


class ProcessingScheduler:
    """
    Sequential drive loop: dequeue -> placeholder -> await merge -> write back -> pace -> repeat.

    Owns the queue, history and stats handles it was given. Exactly one drive loop
    can be active, so at most one merge call is ever outstanding.
    """

    def __init__(
        self,
        *,
        merge_service: "MergeService",
        queue: Optional[InputQueue] = None,
        history: Optional[ResultHistory] = None,
        stats: Optional[StatsAggregator] = None,
        config: Optional[SchedulerConfig] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.merge_service = merge_service
        self.queue = queue if queue is not None else InputQueue()
        self.history = history if history is not None else ResultHistory()
        self.stats = stats if stats is not None else StatsAggregator()
        self.config = config or SchedulerConfig()
        self._clock = clock

        self._state = SchedulerState.IDLE
        self._task: Optional["asyncio.Task[None]"] = None
        self._cancel_requested = False
        self._cancel_event: Optional[asyncio.Event] = None
        self._failure: Optional[Exception] = None
        self._listeners: List[SchedulerListener] = []

    # -----------------------
    # Control
    # -----------------------

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SchedulerState.RUNNING

    def enqueue(self, items: Iterable[InputData]) -> int:
        added = self.queue.append(items)
        if added:
            self._emit(SchedulerEventKind.ENQUEUED)
        return added

    def start(self) -> StartOutcome:
        """
        Schedule the drive loop on the running event loop and return immediately.
        """
        loop = asyncio.get_running_loop()
        outcome = self._claim()
        if outcome is StartOutcome.STARTED:
            self._task = loop.create_task(self._drive_in_background(), name="resolver-drive-loop")
        return outcome

    async def drain(self) -> StartOutcome:
        """
        Like start(), but runs the drive loop inline until the queue drains or cancel().
        """
        outcome = self._claim()
        if outcome is StartOutcome.STARTED:
            await self._drive()
        return outcome

    async def wait_idle(self) -> None:
        """
        Wait for a start()ed drive loop to finish.

        If that loop died with an error, it is raised here once.
        """
        task = self._task
        if task is not None:
            await task
        failure, self._failure = self._failure, None
        if failure is not None:
            raise failure

    def cancel(self) -> bool:
        """
        Ask the drive loop to stop at the next item boundary.

        An in-flight merge is allowed to finish and its entry is written normally.
        Returns False when there is nothing to cancel.
        """
        if not self.is_running:
            return False
        self._cancel_requested = True
        if self._cancel_event is not None:
            self._cancel_event.set()
        return True

    # -----------------------
    # Observability (pull)
    # -----------------------

    def queue_snapshot(self) -> Tuple[InputData, ...]:
        return self.queue.snapshot()

    def history_snapshot(self) -> Tuple[ProcessedResult, ...]:
        return self.history.snapshot()

    def latest_logs(self) -> Tuple[str, ...]:
        latest = self.history.latest()
        return tuple(latest.logs) if latest is not None else ()

    def stats_snapshot(self) -> StatsSnapshot:
        return self.stats.snapshot()

    # -----------------------
    # Observability (push)
    # -----------------------

    def subscribe(self, listener: SchedulerListener) -> Callable[[], None]:
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, kind: SchedulerEventKind, result_id: Optional[str] = None) -> None:
        if not self._listeners:
            return
        event = SchedulerEvent(kind=kind, state=self._state, result_id=result_id, queued=len(self.queue))
        for listener in tuple(self._listeners):
            try:
                listener(event)
            except Exception:
                # listeners are read-only observers; they never steer the loop
                logger.exception("scheduler listener failed on %s event", kind.value)

    # -----------------------
    # Drive loop
    # -----------------------

    def _claim(self) -> StartOutcome:
        if self._state is SchedulerState.RUNNING:
            logger.debug("start ignored: drive loop already running")
            return StartOutcome.ALREADY_RUNNING
        if not self.queue:
            logger.debug("start ignored: queue is empty")
            return StartOutcome.EMPTY_QUEUE

        self._state = SchedulerState.RUNNING
        self._cancel_requested = False
        self._failure = None
        self._cancel_event = asyncio.Event()
        logger.info("drive loop started with %d queued item(s)", len(self.queue))
        self._emit(SchedulerEventKind.STARTED)
        return StartOutcome.STARTED

    async def _drive_in_background(self) -> None:
        # nobody awaits this task directly; wait_idle() hands the error over
        try:
            await self._drive()
        except Exception as exc:
            logger.error("drive loop failed: %s", exc)
            self._failure = exc

    async def _drive(self) -> None:
        cancelled = False
        try:
            while True:
                if self._cancel_requested:
                    cancelled = True
                    break

                item = self.queue.dequeue_head()
                if item is None:
                    break

                await self._process(item)

                remaining = len(self.queue)
                if self._cancel_requested:
                    cancelled = True
                    break
                if remaining == 0:
                    break

                await self._pace(self.config.pacing.delay_for(remaining))
        finally:
            self._state = SchedulerState.IDLE
            self._cancel_requested = False
            self._cancel_event = None
            self._task = None
            if cancelled:
                logger.info("drive loop cancelled with %d item(s) left in queue", len(self.queue))
                self._emit(SchedulerEventKind.CANCELLED)
            logger.info("drive loop idle (processed=%d)", self.stats.processed_count)
            self._emit(SchedulerEventKind.IDLE)

    async def _process(self, item: InputData) -> None:
        self.history.append(ProcessedResult.placeholder(item, log_line=self.config.placeholder_log))
        self._emit(SchedulerEventKind.PLACEHOLDER, item.id)

        t0 = self._clock()
        result = await self._resolve(item)
        duration_ms = max(0.0, (self._clock() - t0) * 1000.0)

        status = self.config.null_output_policy.status_for(result.merged_profile)
        outcome = self.history.update_by_id(
            item.id,
            output=result.merged_profile,
            logs=result.logs,
            duration_ms=duration_ms,
            status=status,
        )
        if outcome is not UpdateOutcome.UPDATED:
            raise HistoryIntegrityError(f"write-back for {item.id} returned {outcome.value}")

        snap = self.stats.record(duration_ms)
        logger.debug(
            "resolved %s status=%s duration_ms=%.1f processed=%d avg_ms=%.1f",
            item.id,
            status.value,
            duration_ms,
            snap.processed_count,
            snap.avg_latency_ms,
        )
        self._emit(SchedulerEventKind.RESOLVED, item.id)

    async def _resolve(self, item: InputData) -> MergeResult:
        # MergeService must not raise; anything that slips through still ends as a visible failure
        try:
            result = await self.merge_service.resolve(item)
        except Exception as exc:
            logger.exception("merge service raised for %s", item.id)
            return MergeResult.failure(str(exc) or type(exc).__name__)

        if not isinstance(result, MergeResult):
            logger.error("merge service returned %s for %s", type(result).__name__, item.id)
            return MergeResult.failure(f"unexpected merge result type {type(result).__name__}")
        return result

    async def _pace(self, delay: float) -> None:
        if delay <= 0:
            await asyncio.sleep(0)
            return
        event = self._cancel_event
        if event is None:
            await asyncio.sleep(delay)
            return
        try:
            await asyncio.wait_for(event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass
