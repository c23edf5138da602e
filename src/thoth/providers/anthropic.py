"""Anthropic (Claude) provider adapter.

Claude models on Vertex AI are called through ``rawPredict`` with an
Anthropic Messages API body. ``max_tokens`` is mandatory, the API
version travels in the body, and the model lives in a separate region
setting because Claude availability is region-limited.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from thoth.core.errors import ContentBlockedError, InvalidResponseError
from thoth.providers.base import (
    GenerationOptions,
    GenerationRequest,
    ResponseFormat,
    strip_prefix,
)
from thoth.providers.vertex import drop_unset, log_stream_dropped, warn_truncated

if TYPE_CHECKING:
    from thoth.providers.vertex import VertexClient

logger = logging.getLogger(__name__)

PROVIDER_ID = "anthropic"
PUBLISHER = "anthropic"
MODEL_PREFIXES = ("anthropic/",)
ANTHROPIC_VERSION = "vertex-2023-10-16"
DEFAULT_MAX_TOKENS = 1024

KNOWN_MODELS: tuple[str, ...] = (
    "claude-opus-4-5@20251001",
    "claude-sonnet-4-5@20251001",
    "claude-haiku-4-5@20251001",
)


def build_payload(request: GenerationRequest) -> dict[str, Any]:
    opts = request.options
    if opts.response_format is ResponseFormat.JSON:
        # No native JSON mode on rawPredict; the prompt carries the instruction
        logger.debug("JSON response format not supported by %s; dropped", PROVIDER_ID)
    return drop_unset(
        {
            "anthropic_version": ANTHROPIC_VERSION,
            "messages": [{"role": "user", "content": request.prompt}],
            "max_tokens": opts.max_output_tokens or DEFAULT_MAX_TOKENS,
            "temperature": opts.temperature,
            "top_p": opts.top_p,
            "top_k": opts.top_k,
            "stop_sequences": list(opts.stop_sequences),
        }
    )


def parse_response(data: dict[str, Any], model_id: str) -> str:
    """Concatenate the text blocks of a Messages API response."""
    stop_reason = data.get("stop_reason")
    # Refusals usually carry no content at all
    if stop_reason == "refusal":
        raise ContentBlockedError(PROVIDER_ID, model_id, "refusal")

    content = data.get("content")
    if not isinstance(content, list) or not content:
        raise InvalidResponseError(
            PROVIDER_ID, model_id, f"no content returned: {json.dumps(data)}"
        )

    if stop_reason == "max_tokens":
        warn_truncated(PROVIDER_ID, model_id)

    return "".join(
        block["text"]
        for block in content
        if isinstance(block, dict)
        and block.get("type") == "text"
        and isinstance(block.get("text"), str)
    )


class AnthropicProvider:
    """Provider adapter for Anthropic's Claude models."""

    def __init__(self, vertex: VertexClient, *, location: str = "global") -> None:
        self._vertex = vertex
        self._location = location

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
        if not model:
            msg = "Model name is required for Anthropic Claude generation"
            raise ValueError(msg)
        request = GenerationRequest(model, prompt, options or GenerationOptions())
        log_stream_dropped(request, PROVIDER_ID)

        endpoint = self._vertex.endpoint(
            PUBLISHER, model, "rawPredict", location=self._location
        )
        data = await self._vertex.post_json(
            endpoint,
            build_payload(request),
            provider_id=PROVIDER_ID,
            model_id=model,
        )
        return parse_response(data, model)
