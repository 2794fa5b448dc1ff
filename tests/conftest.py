import sys
from pathlib import Path

# -------------------------------------------------------------------
# Make repo root importable BEFORE importing any project packages.
# -------------------------------------------------------------------
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402

from resolver_engine.models.input_data import InputData  # noqa: E402
from resolver_engine.runtime import NoPacing, ProcessingScheduler, SchedulerConfig  # noqa: E402
from resolver_engine.testing.stubs import FakeClock, ScriptedMergeService, ScriptedStep  # noqa: E402


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_input():
    """
    Factory for InputData with readable ids; override any field per test.
    """

    def _make(
        item_id: str,
        *,
        customer_id: str = "CUST-1",
        transcript: str = "User: please update my email to new@example.com",
        **record_fields,
    ) -> InputData:
        record = {"customer_id": customer_id, "name": "Ada Lovelace", "email": "ada@old.example"}
        record.update(record_fields)
        return InputData(id=item_id, customer_record=record, chat_transcript=transcript)

    return _make


@pytest.fixture
def make_scheduler(fake_clock):
    """
    Returns a factory: steps -> (scheduler, scripted service), zero pacing + fake clock.
    """

    def _make(steps, **config_overrides):
        service = ScriptedMergeService([ScriptedStep(**s) if isinstance(s, dict) else s for s in steps], clock=fake_clock)
        config = SchedulerConfig(pacing=NoPacing(), **config_overrides)
        scheduler = ProcessingScheduler(merge_service=service, config=config, clock=fake_clock)
        return scheduler, service

    return _make
