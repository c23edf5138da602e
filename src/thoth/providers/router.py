"""Provider router: model identifier -> provider adapter.

A model is assigned to a family by an explicit namespacing prefix
(``anthropic/claude-haiku-4.5``) or, failing that, by a family name
appearing anywhere in the identifier (``claude-haiku-4.5``). Anything
unrecognised goes to Gemini, the default family.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from thoth.config.loader import require_vertex_project
from thoth.providers import anthropic, google, meta, openai
from thoth.providers.anthropic import AnthropicProvider
from thoth.providers.google import GoogleProvider
from thoth.providers.meta import MetaProvider
from thoth.providers.openai import OpenAIProvider
from thoth.providers.vertex import VertexClient

if TYPE_CHECKING:
    from thoth.config.schema import ThothConfig
    from thoth.providers.base import ModelProvider
    from thoth.providers.credentials import CredentialProvider

DEFAULT_PROVIDER = google.PROVIDER_ID

# (provider_id, explicit prefix, family substring), checked in order.
# The substring match is deliberately loose: any id containing "claude"
# is billed to the Claude family even without a prefix.
_ROUTES: tuple[tuple[str, str, str], ...] = (
    (anthropic.PROVIDER_ID, "anthropic/", "claude"),
    (meta.PROVIDER_ID, "meta/", "llama"),
    (openai.PROVIDER_ID, "openai/", "gpt-oss"),
)

# Namespacing prefixes removed for display.
DISPLAY_PREFIXES: tuple[str, ...] = ("googleai/", "anthropic/", "meta/", "openai/")


def detect_provider(model_id: str) -> str:
    """Return the provider id responsible for *model_id*."""
    for provider_id, prefix, family in _ROUTES:
        if model_id.startswith(prefix) or family in model_id:
            return provider_id
    return DEFAULT_PROVIDER


def display_name(model_id: str) -> str:
    """Model identifier with its provider namespacing prefix removed."""
    for prefix in DISPLAY_PREFIXES:
        if model_id.startswith(prefix):
            return model_id[len(prefix) :]
    return model_id


class ProviderRouter:
    """Owns one adapter per provider family and dispatches by model id.

    All adapters share a single ``httpx.AsyncClient``. When the router
    creates that client itself it also closes it in :meth:`aclose`.
    """

    def __init__(
        self,
        config: ThothConfig,
        *,
        credentials: CredentialProvider,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        project = require_vertex_project(config)
        self._owns_client = client is None
        timeout = config.timeouts.http_seconds
        self._client = client or httpx.AsyncClient(
            timeout=timeout if timeout > 0 else None
        )
        vertex = VertexClient(
            project=project,
            location=config.vertex.location,
            credentials=credentials,
            client=self._client,
        )
        self._providers: dict[str, ModelProvider] = {
            google.PROVIDER_ID: GoogleProvider(vertex),
            anthropic.PROVIDER_ID: AnthropicProvider(
                vertex, location=config.vertex.anthropic_location
            ),
            meta.PROVIDER_ID: MetaProvider(vertex),
            openai.PROVIDER_ID: OpenAIProvider(vertex),
        }

    @property
    def providers(self) -> dict[str, ModelProvider]:
        return dict(self._providers)

    def route(self, model_id: str) -> ModelProvider:
        """Return the adapter that serves *model_id*."""
        return self._providers[detect_provider(model_id)]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> ProviderRouter:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
