# resolver_providers/scripts/run_conveyor_demo.py
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import replace

from resolver_engine.logging_config import configure_logging
from resolver_engine.models import NullOutputPolicy
from resolver_engine.models.result import ProcessedResult
from resolver_engine.runtime import (
    FixedPacing,
    NoPacing,
    ProcessingScheduler,
    SchedulerConfig,
    SchedulerEvent,
    SchedulerEventKind,
)
from resolver_engine.testing.stubs import generate_input_data
from resolver_providers.llm.llm_provider import DEFAULT_MODEL_ID, default_openai_merge_service
from resolver_providers.stub_service import StubMergeService

logger = logging.getLogger("run_conveyor_demo")


def _print_result(result: ProcessedResult) -> None:
    print(f"\n=== {result.id} [{result.status.value}] {result.duration_ms:.0f}ms ===")
    print("chat:", result.input.chat_transcript.replace("User: ", "", 1))
    print("record:", json.dumps(dict(result.input.customer_record), sort_keys=True))
    print("resolved:", json.dumps(result.output, sort_keys=True, indent=2) if result.output else "(none)")
    for line in result.logs:
        print("  >", line)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run the customer data conveyor over synthetic records.")
    p.add_argument("--count", type=int, default=5, help="number of records to enqueue")
    p.add_argument(
        "--pacing",
        type=float,
        default=None,
        help="seconds between items (0 disables); defaults to RESOLVER_PACING_SECONDS or 2.5",
    )
    p.add_argument(
        "--null-output",
        choices=[policy.value for policy in NullOutputPolicy],
        default=None,
        help="status for a null merge; defaults to RESOLVER_NULL_OUTPUT_POLICY or completed",
    )
    p.add_argument("--llm", action="store_true", help="merge with OpenAI instead of the offline stub")
    p.add_argument("--model", default=DEFAULT_MODEL_ID, help="model id used with --llm")
    p.add_argument("--seed", type=int, default=None, help="seed for synthetic data")
    p.add_argument("--log-level", default="INFO")
    return p.parse_args(argv)


def _scheduler_config(args: argparse.Namespace) -> SchedulerConfig:
    """
    Environment first (SchedulerConfig.from_env), then command-line overrides.
    """
    config = SchedulerConfig.from_env()
    if args.pacing is not None:
        config = replace(config, pacing=NoPacing() if args.pacing <= 0 else FixedPacing(args.pacing))
    if args.null_output is not None:
        config = replace(config, null_output_policy=NullOutputPolicy(args.null_output))
    return config


async def _run(args: argparse.Namespace) -> None:
    if args.llm:
        service = default_openai_merge_service(model_id=args.model)
    else:
        service = StubMergeService(latency_s=0.05)

    scheduler = ProcessingScheduler(merge_service=service, config=_scheduler_config(args))

    def _on_event(event: SchedulerEvent) -> None:
        if event.kind is SchedulerEventKind.RESOLVED and event.result_id:
            result = scheduler.history.get(event.result_id)
            if result is not None:
                _print_result(result)

    scheduler.subscribe(_on_event)
    scheduler.enqueue(generate_input_data(args.count, seed=args.seed))

    try:
        outcome = await scheduler.drain()
    finally:
        await service.aclose()
    logger.info("start outcome: %s", outcome.value)

    stats = scheduler.stats_snapshot()
    print("\n=== STATS ===")
    print("total processed:", stats.processed_count)
    print(f"avg latency: {stats.avg_latency_ms:.0f}ms")
    print(f"last latency: {stats.last_latency_ms:.0f}ms" if stats.processed_count else "last latency: --")


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    configure_logging(args.log_level)
    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
