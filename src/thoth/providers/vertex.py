"""Shared HTTP plumbing for models served through Vertex AI.

Every provider family is reached with an authenticated JSON POST to a
publisher-specific endpoint. This module owns endpoint construction,
the request itself, and the mapping of transport failures onto the
thoth error hierarchy. The ``contents``/``parts`` helpers at the bottom
are shared by the families that use the native ``generateContent``
schema.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from thoth.core.errors import (
    ContentBlockedError,
    InvalidResponseError,
    ProviderError,
    TransportError,
)

if TYPE_CHECKING:
    from thoth.providers.base import GenerationRequest
    from thoth.providers.credentials import CredentialProvider

logger = logging.getLogger(__name__)

GLOBAL_LOCATION = "global"


def vertex_host(location: str) -> str:
    """Return the API host for a region (``global`` has no region prefix)."""
    if location == GLOBAL_LOCATION:
        return "https://aiplatform.googleapis.com"
    return f"https://{location}-aiplatform.googleapis.com"


def build_endpoint(
    *,
    project: str,
    location: str,
    publisher: str,
    model: str,
    method: str,
) -> str:
    """Build a publisher model endpoint URL."""
    return (
        f"{vertex_host(location)}"
        f"/v1/projects/{project}"
        f"/locations/{location}"
        f"/publishers/{publisher}"
        f"/models/{model}:{method}"
    )


class VertexClient:
    """Authenticated JSON-over-HTTPS POSTs against Vertex AI.

    Holds the ``httpx.AsyncClient`` and the credential source shared by
    all provider adapters. Nothing here is mutated per call.
    """

    def __init__(
        self,
        *,
        project: str,
        location: str,
        credentials: CredentialProvider,
        client: httpx.AsyncClient,
    ) -> None:
        self.project = project
        self.location = location
        self._credentials = credentials
        self._client = client

    def endpoint(
        self,
        publisher: str,
        model: str,
        method: str,
        *,
        location: str | None = None,
    ) -> str:
        return build_endpoint(
            project=self.project,
            location=location or self.location,
            publisher=publisher,
            model=model,
            method=method,
        )

    async def post_json(
        self,
        endpoint: str,
        payload: dict[str, Any],
        *,
        provider_id: str,
        model_id: str,
    ) -> dict[str, Any]:
        """POST *payload* and return the decoded JSON object.

        Raises:
            CredentialError: If no bearer token could be obtained.
            TransportError: On network failure or timeout.
            ProviderError: On any non-2xx status.
            InvalidResponseError: If the body is not a JSON object.
        """
        token = await self._credentials.get_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

        logger.debug("POST %s (model=%s)", endpoint, model_id)
        try:
            response = await self._client.post(endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            msg = f"Request timed out for {model_id}: {e}"
            raise TransportError(provider_id, msg, endpoint=endpoint) from e
        except httpx.HTTPError as e:
            msg = f"Request failed for {model_id}: {e}"
            raise TransportError(provider_id, msg, endpoint=endpoint) from e

        if not response.is_success:
            raise ProviderError(
                provider_id,
                response.status_code,
                response.text,
                model_id=model_id,
                endpoint=endpoint,
            )

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            raise InvalidResponseError(
                provider_id, model_id, f"body is not JSON: {response.text[:200]}"
            ) from e
        if not isinstance(data, dict):
            raise InvalidResponseError(
                provider_id, model_id, f"expected a JSON object, got {type(data).__name__}"
            )
        return data


# ── generateContent schema helpers ───────────────────────────────


def user_contents(prompt: str) -> list[dict[str, Any]]:
    """The prompt as a single user turn in ``contents``/``parts`` shape."""
    return [{"role": "user", "parts": [{"text": prompt}]}]


def drop_unset(fields: dict[str, Any]) -> dict[str, Any]:
    """Drop ``None`` values and empty lists so the provider uses defaults."""
    return {k: v for k, v in fields.items() if v is not None and v != []}


def log_stream_dropped(request: GenerationRequest, provider_id: str) -> None:
    if request.options.stream:
        logger.debug(
            "Streaming requested for %s/%s; using unary call",
            provider_id,
            request.model,
        )


def warn_truncated(provider_id: str, model_id: str) -> None:
    """Signal that generation stopped at the output-token cap."""
    logger.warning(
        "Response truncated at the max output tokens limit for %s model %s; "
        "consider increasing max_output_tokens",
        provider_id,
        model_id,
    )


def parse_candidates(
    data: dict[str, Any],
    *,
    provider_id: str,
    model_id: str,
    require_candidate: bool,
) -> str:
    """Extract text from a ``generateContent`` response.

    Concatenates the text parts of the first candidate in order and
    ignores non-text parts such as inline images.

    Args:
        data: Decoded response body.
        provider_id: For error reporting.
        model_id: For error reporting.
        require_candidate: If True, an empty candidate list without a
            block reason is an :class:`InvalidResponseError`; otherwise
            it yields an empty string.
    """
    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback") or {}
        block_reason = feedback.get("blockReason")
        if block_reason:
            raise ContentBlockedError(provider_id, model_id, str(block_reason))
        if require_candidate:
            raise InvalidResponseError(
                provider_id, model_id, f"no candidates returned: {json.dumps(data)}"
            )
        return ""

    candidate = candidates[0]
    if not isinstance(candidate, dict):
        raise InvalidResponseError(provider_id, model_id, "candidate is not an object")

    finish_reason = candidate.get("finishReason")
    if finish_reason == "SAFETY":
        ratings = json.dumps(candidate.get("safetyRatings") or [])
        raise ContentBlockedError(provider_id, model_id, f"SAFETY {ratings}")

    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None

    if finish_reason == "MAX_TOKENS":
        warn_truncated(provider_id, model_id)
        # The cap can be hit before any visible text is produced
        if parts is None:
            return ""

    if not isinstance(parts, list):
        raise InvalidResponseError(
            provider_id, model_id, f"candidate has no content parts: {json.dumps(candidate)}"
        )

    return "".join(
        part["text"]
        for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    )
