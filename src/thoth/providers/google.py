"""Google (Gemini) provider adapter.

Calls the native ``generateContent`` method of Gemini models on
Vertex AI using the ``contents``/``parts`` request schema.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from thoth.providers.base import (
    GenerationOptions,
    GenerationRequest,
    ResponseFormat,
    strip_prefix,
)
from thoth.providers.vertex import (
    drop_unset,
    log_stream_dropped,
    parse_candidates,
    user_contents,
)

if TYPE_CHECKING:
    from thoth.providers.vertex import VertexClient

PROVIDER_ID = "google"
PUBLISHER = "google"
MODEL_PREFIXES = ("googleai/", "models/", "publishers/google/models/")

# Model ids accepted by Vertex AI, usable without a prefix.
KNOWN_MODELS: tuple[str, ...] = (
    "gemini-3-pro",
    "gemini-2.5-pro",
    "gemini-2.5-flash",
    "gemini-2.5-flash-lite",
    "gemini-2.0-flash",
    "gemini-2.0-flash-lite",
)


def _build_generation_config(options: GenerationOptions) -> dict[str, Any]:
    """Map canonical options to Gemini ``generationConfig`` fields."""
    mime_type = (
        "application/json" if options.response_format is ResponseFormat.JSON else None
    )
    return drop_unset(
        {
            "temperature": options.temperature,
            "topK": options.top_k,
            "topP": options.top_p,
            "maxOutputTokens": options.max_output_tokens,
            "stopSequences": list(options.stop_sequences),
            "seed": options.seed,
            "responseMimeType": mime_type,
        }
    )


def build_payload(request: GenerationRequest) -> dict[str, Any]:
    payload: dict[str, Any] = {"contents": user_contents(request.prompt)}
    config = _build_generation_config(request.options)
    if config:
        payload["generationConfig"] = config
    return payload


class GoogleProvider:
    """Provider adapter for Google Gemini models."""

    def __init__(self, vertex: VertexClient) -> None:
        self._vertex = vertex

    @property
    def provider_id(self) -> str:
        return PROVIDER_ID

    async def generate(
        self,
        model_id: str,
        prompt: str,
        options: GenerationOptions | None = None,
    ) -> str:
        model = strip_prefix(model_id, MODEL_PREFIXES)
        request = GenerationRequest(model, prompt, options or GenerationOptions())
        log_stream_dropped(request, PROVIDER_ID)

        endpoint = self._vertex.endpoint(PUBLISHER, model, "generateContent")
        data = await self._vertex.post_json(
            endpoint,
            build_payload(request),
            provider_id=PROVIDER_ID,
            model_id=model,
        )
        # Gemini may legitimately return no candidates
        return parse_candidates(
            data, provider_id=PROVIDER_ID, model_id=model, require_candidate=False
        )
