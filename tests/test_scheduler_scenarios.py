from __future__ import annotations

import asyncio

import pytest

from resolver_engine.models import ResultStatus, SchedulerState, StartOutcome


def test_three_items_with_mixed_latency_and_one_null_output(make_scheduler, make_input) -> None:
    profile1 = {"customer_id": "CUST-1", "email": "new@example.com"}
    scheduler, service = make_scheduler(
        [
            {"latency_ms": 100.0, "profile": profile1},
            {"latency_ms": 50.0, "profile": profile1},
            {"latency_ms": 200.0, "profile": None},
        ]
    )
    scheduler.enqueue([make_input("A"), make_input("B"), make_input("C")])

    outcome = asyncio.run(scheduler.drain())

    assert outcome is StartOutcome.STARTED
    assert scheduler.state is SchedulerState.IDLE

    history = scheduler.history_snapshot()
    assert [r.id for r in history] == ["A", "B", "C"]
    assert [r.status for r in history] == [ResultStatus.COMPLETED] * 3
    assert [r.output for r in history] == [profile1, profile1, None]
    assert [r.duration_ms for r in history] == [
        pytest.approx(100.0),
        pytest.approx(50.0),
        pytest.approx(200.0),
    ]

    stats = scheduler.stats_snapshot()
    assert stats.processed_count == 3
    assert stats.avg_latency_ms == pytest.approx(116.6667, rel=1e-4)
    assert stats.last_latency_ms == pytest.approx(200.0)

    assert service.calls == ["A", "B", "C"]
    assert len(scheduler.queue) == 0


def test_start_on_empty_queue_stays_idle(make_scheduler) -> None:
    scheduler, service = make_scheduler([{"profile": {}}])

    async def _go():
        return scheduler.start()

    outcome = asyncio.run(_go())

    assert outcome is StartOutcome.EMPTY_QUEUE
    assert scheduler.state is SchedulerState.IDLE
    assert scheduler.history_snapshot() == ()
    assert scheduler.stats.processed_count == 0
    assert service.calls == []


def test_double_start_runs_exactly_one_drive_loop(make_scheduler, make_input) -> None:
    scheduler, service = make_scheduler([{"latency_ms": 10.0, "profile": {"ok": True}}])
    scheduler.enqueue([make_input("a"), make_input("b")])

    async def _go():
        first = scheduler.start()
        second = scheduler.start()
        await scheduler.wait_idle()
        return first, second

    first, second = asyncio.run(_go())

    assert first is StartOutcome.STARTED
    assert second is StartOutcome.ALREADY_RUNNING
    assert len(scheduler.history_snapshot()) == 2
    assert service.calls == ["a", "b"]
    assert service.max_in_flight == 1
    assert scheduler.state is SchedulerState.IDLE


def test_start_requires_running_event_loop(make_scheduler, make_input) -> None:
    scheduler, _ = make_scheduler([{"profile": {}}])
    scheduler.enqueue([make_input("a")])

    with pytest.raises(RuntimeError):
        scheduler.start()

    # nothing was claimed
    assert scheduler.state is SchedulerState.IDLE
    assert len(scheduler.queue) == 1
