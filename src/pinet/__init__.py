"""Unofficial client for the Pi Network private REST API.

Exposes the shared authenticated :class:`PiHttpClient`, the account entry
points in :class:`PiAuthApi` and the client's exception types.
"""

from .api import (
    PiAuthApi,
    AuthState,
    ClientConfig,
    Credential,
    CredentialStore,
    PiHttpClient,
    PiException,
    NetworkError,
    ApiError,
    AuthError,
    RefreshError,
)  # noqa: E402

__version__ = "0.1.0"

__all__ = [
    "PiAuthApi",
    "AuthState",
    "ClientConfig",
    "Credential",
    "CredentialStore",
    "PiHttpClient",

    # exceptions
    "PiException",
    "NetworkError",
    "ApiError",
    "AuthError",
    "RefreshError",
]
