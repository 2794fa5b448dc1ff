from __future__ import annotations

from typing import Tuple

from resolver_engine.models.input_data import InputData


def resolution_trace(item: InputData) -> Tuple[str, ...]:
    """
    Log lines shown for a successful merge (live log view).
    """
    return (
        f"Ingested Customer ID: {item.customer_id}",
        "Analyzed Chat Intent...",
        "Merging fields...",
        "Resolved Golden Record.",
    )


def describe_error(exc: BaseException) -> str:
    msg = str(exc).strip()
    return msg or type(exc).__name__
