# resolver_providers/stub_service.py
from __future__ import annotations

import asyncio
import re
from typing import Any, Dict, List

from resolver_engine.models.input_data import InputData
from resolver_engine.models.result import MergeResult

from .protocol import MergeService
from .trace import describe_error, resolution_trace

_EMAIL = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
_PHONE = re.compile(r"\+?\d[\d\s().-]{7,}\d")
_MOVED = re.compile(r"moved to ([A-Z][a-zA-Z]+(?: [A-Z][a-zA-Z]+)*)")
_TIER = re.compile(r"upgraded to (\w+)", re.IGNORECASE)


class StubMergeService(MergeService):
    """
    Offline merge service:
      - starts from the customer record
      - folds in e-mail, phone, city and tier changes spotted in the transcript
      - records which fields the chat changed

    Notes:
    - Deterministic for a given InputData; no network.
    - latency_s only simulates a slow backend for demos.
    """

    service_id = "stub_merge"

    def __init__(self, *, latency_s: float = 0.0) -> None:
        if latency_s < 0:
            raise ValueError("latency_s must be >= 0")
        self._latency_s = latency_s

    async def resolve(self, item: InputData) -> MergeResult:
        if self._latency_s:
            await asyncio.sleep(self._latency_s)
        try:
            profile = merge_record(item)
        except Exception as exc:
            return MergeResult.failure(describe_error(exc))
        return MergeResult(merged_profile=profile, logs=resolution_trace(item))

    async def aclose(self) -> None:
        # nothing to release
        return None


def merge_record(item: InputData) -> Dict[str, Any]:
    text = item.chat_transcript
    profile: Dict[str, Any] = dict(item.customer_record)
    changed: List[str] = []

    email = _EMAIL.search(text)
    if email and email.group(0) != profile.get("email"):
        profile["email"] = email.group(0)
        changed.append("email")

    phone = _PHONE.search(text)
    if phone and phone.group(0).strip() != profile.get("phone"):
        profile["phone"] = phone.group(0).strip()
        changed.append("phone")

    moved = _MOVED.search(text)
    if moved:
        address = dict(profile.get("address") or {})
        if address.get("city") != moved.group(1):
            address["city"] = moved.group(1)
            profile["address"] = address
            changed.append("address.city")

    tier = _TIER.search(text)
    if tier and tier.group(1).lower() != str(profile.get("tier", "")).lower():
        profile["tier"] = tier.group(1).lower()
        changed.append("tier")

    profile["resolution"] = {
        "sources": ["customer_record", "chat_transcript"],
        "changed_fields": changed,
    }
    return profile
