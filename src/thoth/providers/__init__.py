"""LLM provider adapters."""

from thoth.providers.base import (
    GenerationOptions,
    GenerationRequest,
    ModelProvider,
    ResponseFormat,
)
from thoth.providers.router import ProviderRouter, detect_provider, display_name

__all__ = [
    "GenerationOptions",
    "GenerationRequest",
    "ModelProvider",
    "ProviderRouter",
    "ResponseFormat",
    "detect_provider",
    "display_name",
]
