# resolver_providers/llm/openai/client.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Protocol, runtime_checkable

from resolver_providers.llm.packing import RenderedPrompt


@dataclass(frozen=True)
class OpenAIRequest:
    """
    Transport-layer request for an OpenAI-backed adapter.

    Note:
    - rendered_prompt contains the fully packed system/user content + metadata
    - model_id + temperature are threaded explicitly so runs can be compared
    """
    rendered_prompt: RenderedPrompt
    model_id: str
    temperature: float = 0.1
    json_mode: bool = True


@runtime_checkable
class OpenAIClient(Protocol):
    """
    Minimal client interface expected by OpenAIAdapter.

    - adapter owns parsing
    - client owns transport (SDK/HTTP) and returns raw payloads
    - clients holding a connection pool may also expose async aclose()
    """

    async def invoke(self, req: OpenAIRequest) -> Any:
        """
        Execute a model call and return the raw payload (str/dict/etc).
        """
        ...


class OpenAIClientStub(OpenAIClient):
    """
    Deterministic stub for tests.

      OpenAIClientStub(payload=<any>)
      OpenAIClientStub(payloads=[<any>, <any>])

    Returns sequentially; if invoked more times than provided, repeats last payload.
    A payload that is an exception instance is raised instead of returned.
    """

    def __init__(
        self,
        *,
        payload: Any | None = None,
        payloads: list[Any] | None = None,
    ) -> None:
        if payloads is not None:
            self._payloads = list(payloads)
        else:
            self._payloads = [payload]

        self._i = 0
        self.requests: List[OpenAIRequest] = []
        self.closed = False

    async def invoke(self, req: OpenAIRequest) -> Any:
        self.requests.append(req)
        if not self._payloads:
            return None
        if self._i >= len(self._payloads):
            out = self._payloads[-1]
        else:
            out = self._payloads[self._i]
            self._i += 1
        if isinstance(out, BaseException):
            raise out
        return out

    async def aclose(self) -> None:
        self.closed = True
