from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import httpx

from pinet.api.exceptions import ApiError, AuthError, NetworkError, RefreshError
from pinet.shared.logging import get_logger
from pinet.shared.settings import ApiSettings, api_settings
from pinet.shared.utils import mask_secret
from .credential import Credential

logger = get_logger()

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable connection settings of a :class:`PiHttpClient`.

    Attributes:
        base_url (str): URL every request path is resolved against
        timeout (float): Per-request timeout in seconds, refresh included
        default_headers (Mapping[str, str]): Headers sent with every request
        refresh_path (str): Path of the token refresh endpoint
    """

    base_url: str
    timeout: float = 10.0
    default_headers: Mapping[str, str] = field(default_factory=dict)
    refresh_path: str = "/auth/refresh"

    def __post_init__(self):
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(
            self, "default_headers", MappingProxyType({**DEFAULT_HEADERS, **self.default_headers}))

    @classmethod
    def from_settings(cls, settings: Optional[ApiSettings] = None) -> "ClientConfig":
        """Build a config from environment settings."""
        settings = settings or api_settings
        return cls(
            base_url=settings.base_url,
            timeout=settings.timeout,
            default_headers={"User-Agent": settings.user_agent},
            refresh_path=settings.refresh_path,
        )


@dataclass
class PendingRequest:
    """A single outgoing call; ``retried`` caps refresh-triggered retries at one."""

    method: str
    path: str
    params: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    retried: bool = False


class AuthState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    REFRESHING = "refreshing"


class PiHttpClient:
    """
    Shared async HTTP client for the Pi Network API with token management.

    The client owns the only live :class:`Credential` of a session. Requests
    carry ``Authorization: Bearer <token>`` while a credential is set. A 401
    response triggers one token refresh followed by one retry of the original
    request; when the refresh fails the credential is cleared and
    :class:`AuthError` is raised.

    Concurrent 401s share a single in-flight refresh: the first caller starts
    it and later callers await the same task instead of rotating the refresh
    token a second time.

    Example::

        async with PiHttpClient(ClientConfig.from_settings()) as client:
            client.set_credential("A1", "R1")
            balance = await client.request("GET", "/wallet/balance")
    """

    def __init__(
            self,
            config: Optional[ClientConfig] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the client.

        Args:
            config (Optional[ClientConfig]): Connection settings. Defaults to
                :meth:`ClientConfig.from_settings`.
            transport (Optional[httpx.AsyncBaseTransport]): Custom transport,
                e.g. ``httpx.MockTransport`` in tests.
        """
        self.config = config or ClientConfig.from_settings()
        self._http = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            headers=dict(self.config.default_headers),
            transport=transport,
        )
        self._credential: Optional[Credential] = None
        self._refresh_task: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "PiHttpClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._http.aclose()

    @property
    def credential(self) -> Optional[Credential]:
        return self._credential

    @property
    def state(self) -> AuthState:
        if self._refresh_task is not None:
            return AuthState.REFRESHING
        if self._credential is not None:
            return AuthState.AUTHENTICATED
        return AuthState.ANONYMOUS

    @property
    def is_authenticated(self) -> bool:
        return self._credential is not None

    def set_credential(
            self,
            access_token: str,
            refresh_token: Optional[str] = None,
            expires_at: Optional[datetime] = None
    ) -> None:
        """Replace the stored credential; subsequent requests use the new token."""
        if not access_token:
            raise ValueError("access_token is required and cannot be None or empty")

        self._credential = Credential.from_tokens(access_token, refresh_token, expires_at)
        logger.debug(
            "Credential set (access token %s, expires at %s)",
            mask_secret(access_token),
            self._credential.expires_at,
        )

    def clear_credential(self) -> None:
        """Wipe the stored credential. Calling it again is a no-op."""
        if self._credential is None:
            return
        self._credential = None
        logger.info("Credential cleared, client is anonymous")

    def get_access_token(self) -> Optional[str]:
        return self._credential.access_token if self._credential else None

    def get_refresh_token(self) -> Optional[str]:
        return self._credential.refresh_token if self._credential else None

    async def request(
            self,
            method: str,
            path: str,
            *,
            params: Optional[Dict[str, Any]] = None,
            json: Any = None,
            headers: Optional[Dict[str, str]] = None,
            authenticate: bool = True
    ) -> Any:
        """
        Perform an API call and return the parsed JSON body.

        Args:
            method (str): HTTP method (GET, POST, PATCH, ...)
            path (str): Path relative to the base URL (e.g. '/wallet/balance')
            params (Optional[Dict[str, Any]]): URL query parameters
            json (Any): JSON-serializable request body
            headers (Optional[Dict[str, str]]): Extra headers for this call
            authenticate (bool): Attach the bearer token and recover from 401
                by refreshing. Login-style calls pass False.

        Returns:
            Any: Parsed JSON body, raw text for non-JSON bodies, None if empty

        Raises:
            NetworkError: No response was received
            AuthError: 401 that could not be resolved by a token refresh
            ApiError: Any other non-2xx response
        """
        pending = PendingRequest(
            method=method.upper(),
            path=path,
            params=params,
            headers=dict(headers or {}),
            body=json,
        )

        if authenticate:
            await self._refresh_if_expiring(pending)

        while True:
            token = self.get_access_token() if authenticate else None
            response = await self._send(pending, token)

            if response.status_code != 401:
                return self._handle_response(response)

            body = _response_body(response)
            if not authenticate or pending.retried or not self.get_refresh_token():
                logger.warning("%s %s unauthorized, no refresh attempted", pending.method, pending.path)
                raise AuthError("Authentication required", status_code=401, body=body)

            pending.retried = True
            if self.get_access_token() != token:
                # rotated by a concurrent refresh while this request was in flight
                continue

            try:
                await self._refresh_shared()
            except RefreshError as ex:
                self._clear_failed_credential(token)
                raise AuthError("Session expired, log in again", status_code=401, body=body) from ex

    async def refresh(self) -> Credential:
        """
        Exchange the refresh token for a new credential.

        Joins the refresh already in flight, if any, so the refresh token is
        never rotated twice at once. The stored credential is only replaced
        on success.

        Raises:
            RefreshError: No refresh token, transport failure, non-2xx status
                or a response missing the expected token fields
        """
        return await self._refresh_shared()

    async def _refresh(self) -> Credential:
        # raw HTTP client only, never request()
        refresh_token = self.get_refresh_token()
        if not refresh_token:
            raise RefreshError("No refresh token available")

        logger.debug("Refreshing credential with refresh token %s", mask_secret(refresh_token))
        try:
            response = await self._http.post(self.config.refresh_path, json={"refreshToken": refresh_token})
        except httpx.TransportError as ex:
            logger.error("Token refresh failed: %s", ex)
            raise RefreshError(f"Token refresh failed: {ex}") from ex

        body = _response_body(response)
        if not response.is_success:
            logger.warning("Token refresh rejected with status %s", response.status_code)
            raise RefreshError(
                f"Token refresh rejected with status {response.status_code}",
                status_code=response.status_code,
                body=body)

        access_token, new_refresh_token = extract_tokens(body)
        if not access_token or not new_refresh_token:
            raise RefreshError("Token refresh response is missing tokens", status_code=response.status_code, body=body)

        self.set_credential(access_token, new_refresh_token)
        logger.info("Token refreshed successfully, expires at: %s", self._credential.expires_at)
        return self._credential

    async def _refresh_if_expiring(self, pending: PendingRequest) -> None:
        credential = self._credential
        if credential is None or not credential.expires_soon or not credential.refresh_token:
            return

        logger.debug("Access token expires at %s, refreshing before %s %s",
                     credential.expires_at, pending.method, pending.path)
        pending.retried = True
        try:
            await self._refresh_shared()
        except RefreshError as ex:
            self._clear_failed_credential(credential.access_token)
            raise AuthError("Session expired, log in again") from ex

    async def _refresh_shared(self) -> Credential:
        """Start a refresh or join the one already in flight."""
        if self._refresh_task is None:
            self._refresh_task = asyncio.create_task(self._refresh())
            self._refresh_task.add_done_callback(self._on_refresh_done)
        # shield: a cancelled waiter must not cancel the refresh other callers await
        return await asyncio.shield(self._refresh_task)

    def _on_refresh_done(self, task: asyncio.Task) -> None:
        if self._refresh_task is task:
            self._refresh_task = None
        if not task.cancelled():
            # mark retrieved even if every waiter was cancelled
            task.exception()

    def _clear_failed_credential(self, token: Optional[str]) -> None:
        # a newer login may have replaced the credential meanwhile
        if self.get_access_token() in (token, None):
            self.clear_credential()

    async def _send(self, pending: PendingRequest, token: Optional[str]) -> httpx.Response:
        headers = dict(pending.headers)
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            return await self._http.request(
                method=pending.method,
                url=pending.path,
                params=pending.params,
                json=pending.body,
                headers=headers,
            )
        except httpx.TransportError as ex:
            logger.error("%s %s failed: %s", pending.method, pending.path, ex)
            raise NetworkError(f"{pending.method} {pending.path} failed: {ex}", cause=ex) from ex

    def _handle_response(self, response: httpx.Response) -> Any:
        body = _response_body(response)
        if response.is_success:
            return body

        logger.warning("%s %s returned status %s",
                       response.request.method, response.request.url.path, response.status_code)
        raise ApiError(response.status_code, body)


def extract_tokens(body: Any) -> tuple[Optional[str], Optional[str]]:
    """Read ``(access_token, refresh_token)`` from an auth response body."""
    if not isinstance(body, dict):
        return None, None
    access_token = body.get("token") or body.get("accessToken")
    return access_token, body.get("refreshToken")


def _response_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
