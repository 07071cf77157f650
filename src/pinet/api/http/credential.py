"""Credential state held by :class:`PiHttpClient`."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt


@dataclass(frozen=True)
class Credential:
    """
    Access/refresh token pair with optional expiration metadata.

    Attributes:
        access_token (str): Bearer token attached to API requests
        refresh_token (Optional[str]): Token used to obtain a new access token
        expires_at (Optional[datetime]): Access token expiration in UTC, if known
    """

    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None

    def __post_init__(self):
        # naive times are treated as UTC
        if self.expires_at is not None and self.expires_at.tzinfo is None:
            object.__setattr__(self, "expires_at", self.expires_at.replace(tzinfo=timezone.utc))

    @classmethod
    def from_tokens(
            cls,
            access_token: str,
            refresh_token: Optional[str] = None,
            expires_at: Optional[datetime] = None
    ) -> "Credential":
        """Create a Credential, reading the expiration from the access token.

        Pi Network access tokens are JWTs; when ``expires_at`` is not given the
        ``exp`` claim is decoded without signature verification. Opaque tokens
        produce a credential with no known expiration.
        """
        if expires_at is None:
            expires_at = _decode_expiry(access_token)
        return cls(access_token=access_token, refresh_token=refresh_token, expires_at=expires_at)

    @property
    def expired(self) -> bool:
        """Check if the access token is known to have expired."""
        if self.expires_at is None:
            return False
        return datetime.now(tz=timezone.utc) >= self.expires_at

    @property
    def expires_soon(self) -> bool:
        """Check if the access token expires within 1 minute."""
        if self.expires_at is None:
            return False
        return datetime.now(tz=timezone.utc) >= self.expires_at - timedelta(minutes=1)


def _decode_expiry(token: str) -> Optional[datetime]:
    try:
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None

    exp = payload.get("exp")
    if not isinstance(exp, (int, float)):
        return None
    return datetime.fromtimestamp(exp, tz=timezone.utc)
