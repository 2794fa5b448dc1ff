# resolver_engine/models/input_data.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from .types import new_id, now_utc


@dataclass(frozen=True)
class InputData:
    """
    Immutable record of one unit of work on the conveyor.

    - customer_record: the existing structured record (known + arbitrary fields)
    - chat_transcript: free text that may contradict or extend the record
    """
    id: str = field(default_factory=lambda: new_id("in"))
    timestamp: datetime = field(default_factory=now_utc)

    customer_record: Mapping[str, Any] = field(default_factory=dict)
    chat_transcript: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("InputData.id must be a non-empty string")
        # copy so later mutation of the caller's dict cannot leak in
        object.__setattr__(self, "customer_record", dict(self.customer_record or {}))
        object.__setattr__(self, "chat_transcript", self.chat_transcript or "")

    @property
    def customer_id(self) -> Any:
        return self.customer_record.get("customer_id")
