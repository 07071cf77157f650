"""File-backed persistence of the client credential between runs."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from pinet.shared.logging import get_logger
from pinet.shared.settings import api_settings
from .client import PiHttpClient
from .credential import Credential

logger = get_logger()


class StoredCredential(BaseModel):
    """On-disk layout of a persisted credential."""
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None


class CredentialStore:
    """
    Saves and restores a :class:`Credential` as a JSON file.

    The store never touches client internals: it loads a credential into a
    client through :meth:`PiHttpClient.set_credential` and reads it back
    through the client's accessors. The file is written with owner-only
    permissions.
    """

    def __init__(self, path: Optional[str | Path] = None):
        path = path or api_settings.credentials_path
        if not path:
            raise ValueError("Credential store path is required (set PI_CREDENTIALS_PATH)")
        self.path = Path(path).expanduser()

    def load(self) -> Optional[Credential]:
        """Read the stored credential. Missing, unreadable or corrupt files yield None."""
        if not self.path.exists():
            return None

        try:
            stored = StoredCredential.model_validate_json(self.path.read_bytes())
        except (ValidationError, OSError) as ex:
            logger.warning("Ignoring unusable credential file %s: %s", self.path, ex)
            return None

        return Credential.from_tokens(stored.access_token, stored.refresh_token, stored.expires_at)

    def save(self, credential: Optional[Credential]) -> None:
        """Write ``credential`` to disk, or remove the file when it is None."""
        if credential is None:
            self.clear()
            return

        stored = StoredCredential(
            access_token=credential.access_token,
            refresh_token=credential.refresh_token,
            expires_at=credential.expires_at,
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(stored.model_dump_json())
        logger.debug("Credential saved to %s", self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)

    def load_into(self, client: PiHttpClient) -> bool:
        """Restore the stored credential into ``client``; True if one was found."""
        credential = self.load()
        if credential is None:
            return False

        client.set_credential(credential.access_token, credential.refresh_token, credential.expires_at)
        logger.info("Restored credential from %s", self.path)
        return True

    def save_from(self, client: PiHttpClient) -> None:
        """Persist the client's current credential, removing the file if anonymous."""
        self.save(client.credential)
