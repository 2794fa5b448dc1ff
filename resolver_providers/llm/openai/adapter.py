# resolver_providers/llm/openai/adapter.py
from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Dict, Mapping

from resolver_providers.llm.packing import RenderedPrompt

from .client import OpenAIClient, OpenAIRequest

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """
    Models sometimes wrap JSON in ```json ... ``` even when told not to.
    """
    return _FENCE.sub("", text or "").strip()


@dataclass(frozen=True)
class OpenAIAdapter:
    """
    JSON-only adapter:
      RenderedPrompt -> OpenAIClient -> JSON -> merged profile (dict)

    This adapter:
    - does NOT merge anything itself
    - only transports + parses the model's answer
    """

    client: OpenAIClient
    json_mode: bool = True

    async def invoke(self, *, rendered_prompt: RenderedPrompt, model_id: str, temperature: float) -> Any:
        """
        Transport call only. Returns raw payload (str/dict/etc).
        Parsing happens in parse_to_profile().
        """
        req = OpenAIRequest(
            rendered_prompt=rendered_prompt,
            model_id=model_id,
            temperature=float(temperature),
            json_mode=self.json_mode,
        )
        return await self.client.invoke(req)

    async def aclose(self) -> None:
        close = getattr(self.client, "aclose", None)
        if close is not None:
            await close()

    def parse_to_profile(self, payload: Any) -> Dict[str, Any]:
        # ---- Payload normalization (strict but robust) ----
        if isinstance(payload, str):
            text = strip_code_fences(payload) or "{}"
            data = json.loads(text)
        elif isinstance(payload, Mapping):
            data = dict(payload)
        elif is_dataclass(payload) and not isinstance(payload, type):
            data = asdict(payload)
        elif payload is None:
            raise TypeError("OpenAIAdapter received an empty payload.")
        else:
            raise TypeError(f"OpenAIAdapter payload must be JSON string or mapping, got {type(payload).__name__}.")

        if not isinstance(data, dict):
            raise TypeError("Merged profile must be a JSON object.")
        return data
