from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MergeService(Protocol):
    """
    A merge service is anything "smart" that lives OUTSIDE the conveyor:
    - LLM-backed resolvers
    - rules engines
    - deterministic stubs for tests and offline demos

    Contract:
    - resolve() turns one InputData into a MergeResult.
    - resolve() never raises. Internal faults (missing credentials, malformed
      response, transport errors) come back as MergeResult(merged_profile=None,
      logs=("Error: ...",)).
    - Services never touch the queue, history or stats.
    """

    # A stable identifier for logs and demo output.
    service_id: str

    async def resolve(self, item: "InputData") -> "MergeResult":
        ...


# Local imports at bottom to avoid import cycles at import time.
from resolver_engine.models.input_data import InputData  # noqa: E402
from resolver_engine.models.result import MergeResult  # noqa: E402
