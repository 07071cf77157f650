"""HTTP client and credential management for the Pi Network API."""

from .client import (
    AuthState,
    ClientConfig,
    PendingRequest,
    PiHttpClient,
)
from .credential import Credential
from .storage import CredentialStore

__all__ = [
    "AuthState",
    "ClientConfig",
    "Credential",
    "CredentialStore",
    "PendingRequest",
    "PiHttpClient",
]
