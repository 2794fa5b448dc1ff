from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from resolver_engine.models.input_data import InputData
from resolver_engine.models.result import MergeResult

from resolver_providers.protocol import MergeService
from resolver_providers.trace import describe_error, resolution_trace

from resolver_providers.llm.packing import (
    PromptPack,
    RenderedPrompt,
    default_merge_pack_v1,
    render_prompt,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL_ID = "gpt-4.1-mini"
DEFAULT_TEMPERATURE = 0.1


@dataclass(frozen=True)
class MergeRouteSpec:
    """
    Declarative route:
      - provider_id: stable identity shown in logs
      - model_id: model name/alias
      - pack: PromptPack that defines how an InputData is rendered
      - temperature: sampling temperature (0.1 by default)
    """
    provider_id: str
    model_id: str
    pack: PromptPack = field(default_factory=default_merge_pack_v1)
    temperature: float = DEFAULT_TEMPERATURE


class LLMMergeService(MergeService):
    """
    Model-agnostic merge service:

        InputData
          -> render_prompt(pack, item)
          -> adapter.invoke(rendered_prompt, model_id, temperature)
          -> adapter.parse_to_profile(payload)
          -> MergeResult

    Every failure on that path is caught and returned as a null-profile MergeResult.

    Adapter contract (required methods):
      - async invoke(rendered_prompt: RenderedPrompt, model_id: str, temperature: float) -> Any
      - parse_to_profile(payload: Any) -> dict
    Optional:
      - async aclose() -> None
    """

    service_id: str

    def __init__(
        self,
        *,
        route: MergeRouteSpec,
        adapter: Any,
        extra_meta: Optional[Mapping[str, object]] = None,
    ) -> None:
        self.service_id = route.provider_id
        self._route = route
        self._adapter = adapter
        self._extra_meta = dict(extra_meta or {})

    @property
    def route(self) -> MergeRouteSpec:
        return self._route

    async def resolve(self, item: InputData) -> MergeResult:
        try:
            # 1) Pack/Render prompt deterministically
            rendered: RenderedPrompt = render_prompt(
                pack=self._route.pack,
                item=item,
                extra={
                    "provider_id": self.service_id,
                    "model_id": self._route.model_id,
                    "temperature": self._route.temperature,
                    **self._extra_meta,
                },
            )

            # 2) Invoke model via adapter (adapter owns SDK / HTTP specifics)
            payload = await self._adapter.invoke(
                rendered_prompt=rendered,
                model_id=self._route.model_id,
                temperature=self._route.temperature,
            )

            # 3) Parse into a golden record
            profile = self._adapter.parse_to_profile(payload)
        except Exception as exc:
            logger.warning("merge failed for %s via %s: %s", item.id, self.service_id, exc, exc_info=True)
            return MergeResult.failure(describe_error(exc))

        return MergeResult(merged_profile=profile, logs=resolution_trace(item))

    async def aclose(self) -> None:
        """
        Release the adapter's transport (e.g. the SDK's HTTP pool). Call once, after the last resolve().
        """
        close = getattr(self._adapter, "aclose", None)
        if close is not None:
            await close()


def default_openai_merge_service(
    *,
    model_id: str = DEFAULT_MODEL_ID,
    adapter: Any = None,
    temperature: float = DEFAULT_TEMPERATURE,
    provider_id: str = "openai_merge",
) -> LLMMergeService:
    """
    Convenience factory:
    - Uses the default_merge_pack_v1() pack
    - Builds an OpenAIAdapter over the real SDK client unless an adapter is given
    """
    if adapter is None:
        from resolver_providers.llm.openai import OpenAIAdapter, OpenAISDKClient, OpenAISDKConfig

        adapter = OpenAIAdapter(client=OpenAISDKClient(config=OpenAISDKConfig.from_env()))

    route = MergeRouteSpec(
        provider_id=provider_id,
        model_id=model_id,
        pack=default_merge_pack_v1(),
        temperature=temperature,
    )
    return LLMMergeService(route=route, adapter=adapter)
