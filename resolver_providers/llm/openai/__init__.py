from __future__ import annotations

from .adapter import OpenAIAdapter, strip_code_fences
from .client import OpenAIClient, OpenAIClientStub, OpenAIRequest
from .client_sdk import OpenAISDKClient, OpenAISDKConfig

__all__ = [
    "OpenAIAdapter",
    "OpenAIClient",
    "OpenAIClientStub",
    "OpenAIRequest",
    "OpenAISDKClient",
    "OpenAISDKConfig",
    "strip_code_fences",
]
