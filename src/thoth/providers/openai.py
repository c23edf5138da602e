"""OpenAI (GPT-OSS) provider adapter.

The open-weight ``gpt-oss`` models are served through the native
``generateContent`` schema. They take no top-k setting, sample at
temperature 1.0 unless told otherwise and need an output-token cap.
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

PROVIDER_ID = "openai"
PUBLISHER = "openai"
MODEL_PREFIXES = ("openai/",)
DEFAULT_MAX_OUTPUT_TOKENS = 1024
DEFAULT_TEMPERATURE = 1.0

KNOWN_MODELS: tuple[str, ...] = (
    "openai/gpt-oss-120b-maas",
    "openai/gpt-oss-20b-maas",
)


def build_payload(request: GenerationRequest) -> dict[str, Any]:
    opts = request.options
    temperature = DEFAULT_TEMPERATURE if opts.temperature is None else opts.temperature
    return {
        "contents": user_contents(request.prompt),
        "generationConfig": drop_unset(
            {
                "temperature": temperature,
                "topP": opts.top_p,
                "maxOutputTokens": opts.max_output_tokens or DEFAULT_MAX_OUTPUT_TOKENS,
                "stopSequences": list(opts.stop_sequences),
                "seed": opts.seed,
            }
        ),
    }


class OpenAIProvider:
    """Provider adapter for OpenAI open-weight GPT models."""

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
