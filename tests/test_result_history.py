from __future__ import annotations

import pytest

from resolver_engine.models import PLACEHOLDER_LOG, ProcessedResult, ResultStatus, UpdateOutcome
from resolver_engine.runtime.history import ResultHistory


def _complete(history: ResultHistory, result_id: str, **overrides) -> UpdateOutcome:
    kwargs = dict(output={"name": "Ada"}, logs=("done",), duration_ms=12.5, status=ResultStatus.COMPLETED)
    kwargs.update(overrides)
    return history.update_by_id(result_id, **kwargs)


def test_placeholder_shape(make_input) -> None:
    item = make_input("a")
    ph = ProcessedResult.placeholder(item)

    assert ph.id == "a"
    assert ph.input is item
    assert ph.output is None
    assert ph.logs == (PLACEHOLDER_LOG,)
    assert ph.duration_ms == 0
    assert ph.status is ResultStatus.PROCESSING
    assert not ph.is_terminal


def test_append_rejects_duplicate_id(make_input) -> None:
    h = ResultHistory()
    h.append(ProcessedResult.placeholder(make_input("a")))
    with pytest.raises(ValueError):
        h.append(ProcessedResult.placeholder(make_input("a")))
    assert len(h) == 1


def test_update_replaces_in_place_and_keeps_position(make_input) -> None:
    h = ResultHistory()
    for rid in ("a", "b", "c"):
        h.append(ProcessedResult.placeholder(make_input(rid)))

    assert _complete(h, "b", logs=("x", "y")) is UpdateOutcome.UPDATED

    assert h.ids() == ("a", "b", "c")
    b = h.get("b")
    assert b is not None
    assert b.status is ResultStatus.COMPLETED
    assert b.output == {"name": "Ada"}
    assert b.logs == ("x", "y")  # replaced wholesale, placeholder line gone
    assert b.duration_ms == pytest.approx(12.5)

    # neighbours untouched
    assert h.get("a").status is ResultStatus.PROCESSING
    assert h.get("c").status is ResultStatus.PROCESSING


def test_update_unknown_id_reports_not_found() -> None:
    h = ResultHistory()
    assert _complete(h, "missing") is UpdateOutcome.NOT_FOUND


def test_terminal_entry_is_never_revisited(make_input) -> None:
    h = ResultHistory()
    h.append(ProcessedResult.placeholder(make_input("a")))
    assert _complete(h, "a") is UpdateOutcome.UPDATED

    again = _complete(h, "a", output=None, logs=("late",), duration_ms=99.0)
    assert again is UpdateOutcome.ALREADY_TERMINAL
    assert h.get("a").logs == ("done",)
    assert h.get("a").duration_ms == pytest.approx(12.5)


def test_latest_and_snapshot(make_input) -> None:
    h = ResultHistory()
    assert h.latest() is None
    assert h.snapshot() == ()

    h.append(ProcessedResult.placeholder(make_input("a")))
    h.append(ProcessedResult.placeholder(make_input("b")))

    snap = h.snapshot()
    _complete(h, "b")

    assert h.latest().id == "b"
    assert h.latest().status is ResultStatus.COMPLETED
    # earlier snapshot is stable
    assert snap[1].status is ResultStatus.PROCESSING
    assert [r.id for r in h] == ["a", "b"]


def test_with_outcome_requires_terminal_status(make_input) -> None:
    ph = ProcessedResult.placeholder(make_input("a"))
    with pytest.raises(ValueError):
        ph.with_outcome(output=None, logs=(), duration_ms=1.0, status=ResultStatus.PROCESSING)


def test_result_id_must_match_input(make_input) -> None:
    with pytest.raises(ValueError):
        ProcessedResult(id="other", input=make_input("a"))
