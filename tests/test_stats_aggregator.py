from __future__ import annotations

import random

import pytest

from resolver_engine.runtime.stats import StatsAggregator, StatsSnapshot


def test_empty_stats() -> None:
    s = StatsAggregator()
    assert s.processed_count == 0
    assert s.avg_latency_ms == 0.0
    assert s.last_latency_ms == 0.0


def test_running_mean_matches_arithmetic_mean() -> None:
    rng = random.Random(7)
    durations = [rng.uniform(1.0, 500.0) for _ in range(50)]

    s = StatsAggregator()
    counts = []
    for d in durations:
        s.record(d)
        counts.append(s.processed_count)

    assert counts == list(range(1, 51))
    assert s.avg_latency_ms == pytest.approx(sum(durations) / len(durations))
    assert s.last_latency_ms == pytest.approx(durations[-1])


def test_record_returns_consistent_snapshot() -> None:
    s = StatsAggregator()
    s.record(100.0)
    snap = s.record(50.0)

    assert snap == s.snapshot()
    assert snap.processed_count == 2
    assert snap.avg_latency_ms == pytest.approx(75.0)


def test_plus_uses_pre_increment_count() -> None:
    snap = StatsSnapshot(processed_count=2, avg_latency_ms=75.0)
    nxt = snap.plus(200.0)
    assert nxt.processed_count == 3
    assert nxt.avg_latency_ms == pytest.approx(350.0 / 3)
    # original is untouched
    assert snap.processed_count == 2


def test_negative_duration_rejected() -> None:
    s = StatsAggregator()
    with pytest.raises(ValueError):
        s.record(-1.0)
    assert s.processed_count == 0
