# resolver_providers/llm/packing.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from resolver_engine.models.input_data import InputData


@dataclass(frozen=True)
class PromptPack:
    """
    v1 prompt pack: str.format templates only.

    user_template placeholders: {customer_record_json}, {chat_transcript}
    """
    pack_id: str
    pack_version: str
    system_template: str
    user_template: str


@dataclass(frozen=True)
class RenderedPrompt:
    """
    Canonical, deterministic prompt object for adapters.
    """
    pack_id: str
    pack_version: str
    system: str
    user: str
    meta: Mapping[str, object]


SYSTEM_INSTRUCTION_MERGE = """\
You are a customer data resolution engine.

You receive an existing customer record (JSON) and a chat transcript from the same
customer. The transcript is newer than the record and may correct, extend or
contradict it. Produce the single resolved "golden record".

Rules:
- Start from the record; apply every change the customer states in the chat.
- Keep fields the chat does not mention unchanged, including unknown extra fields.
- Normalize obvious formatting noise (casing of names, e-mail whitespace, phone formatting).
- Never invent values that appear in neither source.
- Add "changes": a list of {"field", "old", "new", "source"} objects for every field you changed.
- Add "confidence": a number between 0 and 1.

Respond with one JSON object only. No prose, no Markdown."""


USER_TEMPLATE_MERGE = """\
INPUT CONTEXT:
Customer Record (JSON): {customer_record_json}

Chat Transcript: "{chat_transcript}"

Task: Resolve the final state of the customer data based on the chat."""


def default_merge_pack_v1() -> PromptPack:
    return PromptPack(
        pack_id="merge",
        pack_version="v1",
        system_template=SYSTEM_INSTRUCTION_MERGE,
        user_template=USER_TEMPLATE_MERGE,
    )


def _record_json(record: Mapping[str, Any]) -> str:
    # default=str keeps datetimes/decimals in arbitrary legacy fields renderable
    return json.dumps(dict(record), ensure_ascii=False, sort_keys=True, default=str)


def render_prompt(
    *,
    pack: PromptPack,
    item: InputData,
    extra: Optional[Mapping[str, object]] = None,
) -> RenderedPrompt:
    user = pack.user_template.format(
        customer_record_json=_record_json(item.customer_record),
        chat_transcript=(item.chat_transcript or "").strip(),
    )

    meta: dict[str, object] = {
        "pack_id": pack.pack_id,
        "pack_version": pack.pack_version,
        "input_id": item.id,
    }
    if extra:
        meta.update(dict(extra))

    return RenderedPrompt(
        pack_id=pack.pack_id,
        pack_version=pack.pack_version,
        system=pack.system_template,
        user=user,
        meta=meta,
    )
