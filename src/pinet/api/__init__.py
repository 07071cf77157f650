from .auth import PiAuthApi
from .exceptions import (
    PiException,
    NetworkError,
    ApiError,
    AuthError,
    RefreshError,
)
from .http import (
    AuthState,
    ClientConfig,
    Credential,
    CredentialStore,
    PiHttpClient,
)

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
