from __future__ import annotations

import asyncio

from resolver_engine.models import InputData, ResultStatus
from resolver_engine.runtime import NoPacing, ProcessingScheduler, SchedulerConfig
from resolver_engine.testing.stubs import generate_input_data
from resolver_providers import MergeService, StubMergeService
from resolver_providers.stub_service import merge_record


def test_merge_record_applies_chat_changes() -> None:
    item = InputData(
        id="a",
        customer_record={
            "customer_id": "CUST-9",
            "email": "ada@old.example",
            "phone": "+1-555-000-0000",
            "address": {"city": "Austin", "zip": "73301"},
            "tier": "silver",
            "legacy_notes": "keep me",
        },
        chat_transcript="User: I'm Ada, moved to Denver and my number is +1-303-555-1234. new mail ada@new.example",
    )

    profile = merge_record(item)

    assert profile["email"] == "ada@new.example"
    assert profile["phone"] == "+1-303-555-1234"
    assert profile["address"] == {"city": "Denver", "zip": "73301"}
    assert profile["tier"] == "silver"
    assert profile["legacy_notes"] == "keep me"
    assert profile["resolution"]["changed_fields"] == ["email", "phone", "address.city"]
    # source record untouched
    assert item.customer_record["address"]["city"] == "Austin"


def test_merge_record_without_changes() -> None:
    item = InputData(id="a", customer_record={"customer_id": "C", "tier": "gold"}, chat_transcript="User: thanks!")
    profile = merge_record(item)
    assert profile["resolution"]["changed_fields"] == []
    assert profile["tier"] == "gold"


def test_tier_upgrade_detected() -> None:
    item = InputData(
        id="a",
        customer_record={"customer_id": "C", "tier": "silver"},
        chat_transcript="User: I upgraded to Platinum last week",
    )
    assert merge_record(item)["tier"] == "platinum"


def test_stub_service_resolves_generated_batch_through_scheduler() -> None:
    service = StubMergeService()
    assert isinstance(service, MergeService)

    scheduler = ProcessingScheduler(merge_service=service, config=SchedulerConfig(pacing=NoPacing()))
    batch = generate_input_data(5, seed=11)
    scheduler.enqueue(batch)

    asyncio.run(scheduler.drain())

    history = scheduler.history_snapshot()
    assert [r.id for r in history] == [it.id for it in batch]
    assert all(r.status is ResultStatus.COMPLETED for r in history)
    assert all(r.output is not None for r in history)
    assert all(r.logs[0] == f"Ingested Customer ID: {r.input.customer_id}" for r in history)
    assert scheduler.stats.processed_count == 5
