# resolver_providers/llm/openai/client_sdk.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from openai import AsyncOpenAI

from .client import OpenAIClient, OpenAIRequest


@dataclass(frozen=True)
class OpenAISDKConfig:
    """
    Minimal config for the OpenAI Python SDK client.
    Keep it transport-only: no schema, no parsing, no policy.
    """
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    organization: Optional[str] = None
    project: Optional[str] = None
    timeout_s: Optional[float] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OpenAISDKConfig":
        """
        RESOLVER_OPENAI_API_KEY / RESOLVER_OPENAI_BASE_URL / RESOLVER_OPENAI_TIMEOUT_S.
        Anything unset falls through to the SDK's own OPENAI_* lookup.
        """
        env = os.environ if environ is None else environ
        timeout = (env.get("RESOLVER_OPENAI_TIMEOUT_S") or "").strip()
        return cls(
            api_key=env.get("RESOLVER_OPENAI_API_KEY") or None,
            base_url=env.get("RESOLVER_OPENAI_BASE_URL") or None,
            timeout_s=float(timeout) if timeout else None,
        )


class OpenAISDKClient(OpenAIClient):
    """
    Real transport client using the async OpenAI Python SDK (Responses API).

    Contract:
      invoke(OpenAIRequest) -> raw payload (output text, expected to be JSON-only per prompt pack)

    The SDK client is built on first use, so missing credentials surface inside the
    merge call (where they are contained) rather than at wiring time.
    """

    def __init__(self, *, config: OpenAISDKConfig | None = None) -> None:
        self._config = config or OpenAISDKConfig()
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            cfg = self._config
            # The AsyncOpenAI() constructor pulls from env by default; these kwargs override when provided.
            kwargs: dict[str, Any] = {}
            if cfg.api_key:
                kwargs["api_key"] = cfg.api_key
            if cfg.base_url:
                kwargs["base_url"] = cfg.base_url
            if cfg.organization:
                kwargs["organization"] = cfg.organization
            if cfg.project:
                kwargs["project"] = cfg.project
            if cfg.timeout_s is not None:
                kwargs["timeout"] = cfg.timeout_s
            self._client = AsyncOpenAI(**kwargs)
        return self._client

    async def invoke(self, req: OpenAIRequest) -> Any:
        """
        Use Responses API:
          - instructions = system message
          - input = user message
        Return aggregated output text (SDK convenience).
        """
        kwargs: dict[str, Any] = {
            "model": req.model_id,
            "instructions": req.rendered_prompt.system,
            "input": req.rendered_prompt.user,
            "temperature": req.temperature,
        }
        if req.json_mode:
            kwargs["text"] = {"format": {"type": "json_object"}}

        resp = await self._get_client().responses.create(**kwargs)

        out = getattr(resp, "output_text", None)
        if isinstance(out, str):
            return out

        # Let the adapter decide what to do with anything else.
        return resp

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
