"""Persistent private-token store scoped per profile.

Stores the token obtained by ``gitlab-client auth login`` in
``~/.local/share/gitlab-client/credentials/<profile>.json`` (XDG) or the
platform-equivalent directory. Files are written atomically with ``0o600``
permissions so that tokens are never world-readable, even momentarily.

See Also:
    :func:`~gitlab_client.config.resolve_credential` -- the ``store:PROFILE``
    credential source reads from here.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from gitlab_client.config import _atomic_write, get_data_dir


class CredentialEntry(BaseModel):
    """A stored private token and the account it belongs to."""

    private_token: str
    username: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def _credentials_dir() -> Path:
    path = get_data_dir() / "credentials"
    path.mkdir(parents=True, exist_ok=True)
    return path


class CredentialStore:
    """Read/write the private token for a single profile.

    Args:
        profile_name: The profile identifier used to derive the file name.

    Example::

        store = CredentialStore("work")
        store.save(CredentialEntry(private_token="tok123", username="jdoe"))
        assert store.load().private_token == "tok123"
    """

    def __init__(self, profile_name: str) -> None:
        self._profile_name = profile_name
        self._path = _credentials_dir() / f"{profile_name}.json"

    @property
    def path(self) -> Path:
        """The filesystem path to this profile's credential file."""
        return self._path

    def save(self, entry: CredentialEntry) -> None:
        """Persist *entry* atomically with ``0o600`` permissions."""
        text = json.dumps(entry.model_dump(mode="json"), indent=2) + "\n"
        _atomic_write(self._path, text, mode=0o600)

    def load(self) -> Optional[CredentialEntry]:
        """Return the stored entry, or ``None`` if missing or unreadable."""
        if not self._path.is_file():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return CredentialEntry.model_validate(data)
        except (json.JSONDecodeError, ValueError, OSError):
            return None

    def clear(self) -> None:
        """Delete the stored credential file; a no-op if it is already gone."""
        if self._path.is_file():
            self._path.unlink()
