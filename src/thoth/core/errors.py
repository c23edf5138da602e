"""Exception hierarchy for thoth.

Every module imports from here. The hierarchy is:

    ThothError
    ├── TransportError(provider_id, endpoint)
    │   └── CredentialError
    ├── ProviderError(provider_id, status, body, model_id, endpoint)
    ├── ContentBlockedError(provider_id, model_id, reason)
    ├── InvalidResponseError(provider_id, model_id)
    ├── ParseError
    └── ConfigError

Per-model failures are converted to sentinel answers by the collector and
judge failures to the fixed error verdict, so only ``ConfigError`` is
expected to reach callers.
"""

from __future__ import annotations


class ThothError(Exception):
    """Base exception for all thoth errors."""


# ─── Transport Errors ─────────────────────────────────────────


class TransportError(ThothError):
    """Network failure, timeout, or unreadable HTTP exchange."""

    def __init__(self, provider_id: str, message: str, *, endpoint: str = "") -> None:
        self.provider_id = provider_id
        self.endpoint = endpoint
        super().__init__(f"[{provider_id}] {message}")


class CredentialError(TransportError):
    """Bearer token could not be obtained for an outbound call."""


# ─── Provider Errors ──────────────────────────────────────────


class ProviderError(ThothError):
    """Provider answered with a non-success HTTP status."""

    def __init__(
        self,
        provider_id: str,
        status: int,
        body: str,
        *,
        model_id: str,
        endpoint: str,
    ) -> None:
        self.provider_id = provider_id
        self.status = status
        self.body = body
        self.model_id = model_id
        self.endpoint = endpoint
        super().__init__(
            f"[{provider_id}] API error ({status}): {body}\n"
            f"Model: {model_id}\n"
            f"Endpoint: {endpoint}"
        )


class ContentBlockedError(ThothError):
    """Prompt or response was blocked by a safety filter."""

    def __init__(self, provider_id: str, model_id: str, reason: str) -> None:
        self.provider_id = provider_id
        self.model_id = model_id
        self.reason = reason
        super().__init__(
            f"[{provider_id}] Blocked by safety filters: {reason} (model: {model_id})"
        )


class InvalidResponseError(ThothError):
    """Provider response body has an unexpected shape."""

    def __init__(self, provider_id: str, model_id: str, detail: str) -> None:
        self.provider_id = provider_id
        self.model_id = model_id
        super().__init__(f"[{provider_id}] Invalid response for {model_id}: {detail}")


# ─── Consensus Errors ─────────────────────────────────────────


class ParseError(ThothError):
    """Judge output is not valid JSON or misses required fields."""


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(ThothError):
    """Missing or invalid configuration. Fatal at startup."""
