"""Provider adapter interface and data classes.

All provider adapters implement the ``ModelProvider`` protocol: one
``generate`` call that turns a canonical request into plain text.
Data classes are immutable (frozen dataclasses with slots).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


class ResponseFormat(enum.Enum):
    """Shape of the text a model is asked to produce."""

    TEXT = "text"
    JSON = "json"


@dataclass(frozen=True, slots=True)
class GenerationOptions:
    """Sampling and length settings for one call.

    Each adapter honours the subset its provider supports and silently
    drops the rest. ``None`` means "provider default".
    """

    temperature: float | None = None
    top_k: int | None = None
    top_p: float | None = None
    max_output_tokens: int | None = None
    stop_sequences: tuple[str, ...] = ()
    response_format: ResponseFormat = ResponseFormat.TEXT
    seed: int | None = None
    stream: bool = False


@dataclass(frozen=True, slots=True)
class GenerationRequest:
    """A single prompt addressed to one model."""

    model: str
    prompt: str
    options: GenerationOptions = field(default_factory=GenerationOptions)


def strip_prefix(model_id: str, prefixes: tuple[str, ...]) -> str:
    """Remove every leading namespacing prefix in *prefixes*, in order."""
    clean = model_id.strip()
    for prefix in prefixes:
        if clean.startswith(prefix):
            clean = clean[len(prefix) :]
    return clean


@runtime_checkable
class ModelProvider(Protocol):
    """Protocol that all provider adapters must satisfy.

    Implementations are stateless between calls: they hold connection
    config but nothing tied to a particular question.
    """

    @property
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'google', 'anthropic')."""
        ...

    async def generate(
        self,
        model_id: str,
        prompt: str,
        options: GenerationOptions | None = None,
    ) -> str:
        """Send *prompt* to *model_id* and return the generated text.

        Args:
            model_id: Model identifier, optionally carrying a provider
                prefix such as ``anthropic/``.
            prompt: Single user turn.
            options: Sampling settings. ``None`` uses defaults.

        Raises:
            TransportError: Network failure.
            ProviderError: Non-success HTTP status.
            ContentBlockedError: Safety filter triggered.
            InvalidResponseError: Unexpected response shape.
        """
        ...
