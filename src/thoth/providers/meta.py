"""Meta (Llama) provider adapter.

Llama models in the Vertex AI Model Garden accept the native
``generateContent`` schema. Unlike Gemini they always return at least
one candidate, and they require an explicit output-token cap.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from thoth.providers.base import GenerationOptions, GenerationRequest, strip_prefix
from thoth.providers.vertex import (
    drop_unset,
    log_stream_dropped,
    parse_candidates,
    user_contents,
)

if TYPE_CHECKING:
    from thoth.providers.vertex import VertexClient

PROVIDER_ID = "meta"
PUBLISHER = "meta"
MODEL_PREFIXES = ("meta/",)
DEFAULT_MAX_OUTPUT_TOKENS = 1024

KNOWN_MODELS: tuple[str, ...] = (
    "meta/llama-4-maverick-17b-128e-instruct-maas",
    "meta/llama-4-scout-17b-16e-instruct-maas",
    "meta/llama-3.3-70b-instruct-maas",
    "meta/llama-3.1-405b-instruct-maas",
    "meta/llama-3.1-8b-instruct-maas",
)


def build_payload(request: GenerationRequest) -> dict[str, Any]:
    opts = request.options
    return {
        "contents": user_contents(request.prompt),
        "generationConfig": drop_unset(
            {
                "temperature": opts.temperature,
                "topK": opts.top_k,
                "topP": opts.top_p,
                "maxOutputTokens": opts.max_output_tokens or DEFAULT_MAX_OUTPUT_TOKENS,
                "stopSequences": list(opts.stop_sequences),
                "seed": opts.seed,
            }
        ),
    }


class MetaProvider:
    """Provider adapter for Meta Llama models."""

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
        return parse_candidates(
            data, provider_id=PROVIDER_ID, model_id=model, require_candidate=True
        )
