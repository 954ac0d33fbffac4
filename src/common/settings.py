"""Persistent key/value settings for media server credentials.

Each client keeps three string values (server address, username, password)
under fixed keys. Values live in a single JSON document on disk, which is
rewritten whenever a client is reconfigured.

Passwords are stored as plain text. Anyone able to read the settings file
can read them.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

SETTINGS_PATH_ENV = "MEDIACLIENT_SETTINGS_PATH"


def default_settings_path() -> Path:
    """Return the settings file location.

    Uses ``MEDIACLIENT_SETTINGS_PATH`` when set, otherwise
    ``~/.config/mediaclient/settings.json``.
    """
    override = os.getenv(SETTINGS_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "mediaclient" / "settings.json"


def normalize_address(address: str) -> str:
    """Normalize a user-entered server address.

    Whitespace is stripped, ``https://`` is prepended when no http(s) scheme
    is present, and a single trailing ``/`` is removed.

    Example:
        >>> normalize_address(" example.com ")
        'https://example.com'
        >>> normalize_address("http://x/")
        'http://x'
    """
    normalized = address.strip()
    if not normalized.startswith(("http://", "https://")):
        normalized = "https://" + normalized
    if normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


@dataclass(frozen=True)
class ServerConfiguration:
    """Active connection settings of one client.

    Attributes:
        address: Normalized server base address (empty when unconfigured)
        username: Account name
        password: Account password
    """

    address: str = ""
    username: str = ""
    password: str = ""

    def is_complete(self) -> bool:
        """True when address, username and password are all non-empty."""
        return bool(self.address and self.username and self.password)


class SettingsStore:
    """JSON-file backed string settings.

    The file is read on first access and written atomically on every
    change, so a crash never leaves a half-written document behind.

    Example:
        >>> store = SettingsStore("/tmp/settings.json")
        >>> store.set_many({"SubsonicServerURL": "https://music.example.com"})
        >>> store.get("SubsonicServerURL")
        'https://music.example.com'
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else default_settings_path()
        self._values: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._values is not None:
            return self._values

        if not self.path.exists():
            logger.debug(f"No settings file at {self.path}, starting empty")
            self._values = {}
            return self._values

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.path}: {e}")
            raw = {}

        if not isinstance(raw, dict):
            logger.warning(f"Settings file {self.path} does not hold an object, ignoring it")
            raw = {}

        self._values = {str(k): str(v) for k, v in raw.items() if v is not None}
        return self._values

    def get(self, key: str, default: str = "") -> str:
        """Return the stored string for ``key`` or ``default``."""
        return self._load().get(key, default)

    def set_many(self, values: Dict[str, str]) -> None:
        """Store several values and persist them immediately."""
        current = self._load()
        current.update(values)
        self._write(current)

    def _write(self, values: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=".settings-", suffix=".json", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(values, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"Saved {len(values)} settings to {self.path}")

    def load_configuration(self, address_key: str, username_key: str, password_key: str) -> ServerConfiguration:
        """Read one client's configuration triple."""
        return ServerConfiguration(
            address=self.get(address_key),
            username=self.get(username_key),
            password=self.get(password_key),
        )

    def save_configuration(
        self,
        config: ServerConfiguration,
        address_key: str,
        username_key: str,
        password_key: str,
    ) -> None:
        """Persist one client's configuration triple."""
        self.set_many(
            {
                address_key: config.address,
                username_key: config.username,
                password_key: config.password,
            }
        )
