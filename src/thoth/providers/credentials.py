"""Bearer-token sources for outbound provider calls.

Token retrieval belongs to the cloud account, not to thoth; adapters
only need something that hands out a current token. ``GoogleCredentials``
uses Application Default Credentials, ``StaticTokenCredentials`` wraps a
token obtained elsewhere.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import google.auth
from google.auth import exceptions as auth_exceptions
from google.auth.transport.requests import Request

from thoth.core.errors import ConfigError, CredentialError

if TYPE_CHECKING:
    from google.auth.credentials import Credentials

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

_ADC_HELP = (
    "Authenticate with Application Default Credentials:\n"
    "  gcloud auth application-default login\n"
    "See: https://cloud.google.com/docs/authentication/application-default-credentials"
)


@runtime_checkable
class CredentialProvider(Protocol):
    """Anything that can supply a bearer token."""

    async def get_token(self) -> str:
        """Return a currently valid access token.

        Raises:
            CredentialError: If no token can be obtained.
        """
        ...


class StaticTokenCredentials:
    """A fixed, externally managed bearer token."""

    def __init__(self, token: str) -> None:
        if not token:
            msg = "A non-empty access token is required"
            raise ConfigError(msg)
        self._token = token

    async def get_token(self) -> str:
        return self._token


class GoogleCredentials:
    """Application Default Credentials with the cloud-platform scope.

    The credential object is created once; tokens are refreshed lazily,
    off the event loop, whenever the cached one is no longer valid.
    """

    def __init__(self, credentials: Credentials | None = None) -> None:
        if credentials is None:
            try:
                credentials, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
            except auth_exceptions.DefaultCredentialsError as e:
                msg = f"No Application Default Credentials found: {e}\n{_ADC_HELP}"
                raise ConfigError(msg) from e
        self._credentials: Any = credentials

    async def get_token(self) -> str:
        if not self._credentials.valid:
            try:
                await asyncio.to_thread(self._credentials.refresh, Request())
            except auth_exceptions.GoogleAuthError as e:
                msg = f"Failed to get access token: {e}\n{_ADC_HELP}"
                raise CredentialError("google-auth", msg) from e

        token = self._credentials.token
        if not token:
            msg = "Failed to obtain access token from Google Auth"
            raise CredentialError("google-auth", msg)
        return str(token)
