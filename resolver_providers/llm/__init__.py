from __future__ import annotations

from .llm_provider import LLMMergeService, MergeRouteSpec, default_openai_merge_service
from .packing import PromptPack, RenderedPrompt, default_merge_pack_v1, render_prompt

__all__ = [
    "LLMMergeService",
    "MergeRouteSpec",
    "default_openai_merge_service",
    "PromptPack",
    "RenderedPrompt",
    "default_merge_pack_v1",
    "render_prompt",
]
