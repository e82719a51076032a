"""Durable, role-scoped credential storage."""

from pathlib import Path
from typing import Dict, Optional, Union
import json
import logging
import os
import tempfile

logger = logging.getLogger(__name__)

# Storage keys per role
ADMIN_TOKEN_KEY = "aToken"
DOCTOR_TOKEN_KEY = "dToken"
PATIENT_TOKEN_KEY = "token"


class LocalStorage:
    """String key/value storage persisted as a JSON file.

    With ``path=None`` nothing touches disk. Every write rewrites the whole
    file; reads always go back to the file so several stores sharing a path
    see each other's writes.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None
        self._memory: Dict[str, str] = {}

    def _load(self) -> Dict[str, str]:
        if self.path is None:
            return dict(self._memory)
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning(f"Ignoring unreadable storage file {self.path}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        if self.path is None:
            self._memory = data
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Readers never see a half-written file
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(data, tmp)
            os.replace(tmp_path, self.path)
        except Exception:
            os.unlink(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


class CredentialStore:
    """Holds one role's session credential.

    Presence of a credential is the only signal of being logged in. Expiry
    is not tracked here; a stale token surfaces as a rejected API call.
    """

    def __init__(self, storage: LocalStorage, key: str):
        self.storage = storage
        self.key = key
        self._token: Optional[str] = storage.get_item(key) or None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        if not token:
            raise ValueError("Credential must be a non-empty string")
        self._token = token
        self.storage.set_item(self.key, token)
        logger.info(f"Stored credential under {self.key}")

    def clear(self) -> None:
        self._token = None
        self.storage.remove_item(self.key)
        logger.info(f"Cleared credential under {self.key}")

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None
