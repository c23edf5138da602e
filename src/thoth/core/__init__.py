"""Core types, errors, and shared utilities."""

from thoth.core.errors import (
    ConfigError,
    ContentBlockedError,
    CredentialError,
    InvalidResponseError,
    ParseError,
    ProviderError,
    ThothError,
    TransportError,
)

__all__ = [
    "ConfigError",
    "ContentBlockedError",
    "CredentialError",
    "InvalidResponseError",
    "ParseError",
    "ProviderError",
    "ThothError",
    "TransportError",
]
