"""File-backed key-value store for client-side settings.

Behaves like a browser's localStorage: string keys map to string values and
everything survives restarts. Two records are used::

    llm-config       JSON-serialized LLMConfig
    openai-api-key   bare API key from the single-provider client (read for
                     migration, still written when only the key is edited)

Directory layout::

    data/
      local_storage.json          single-user store
      users/
        ada_at_example.com/
          local_storage.json      one store per signed-in user
"""

import json
import logging
import re
from pathlib import Path

from ..models.llm_config import LLMConfig

logger = logging.getLogger(__name__)

CONFIG_KEY = "llm-config"
LEGACY_API_KEY = "openai-api-key"

_UNSAFE_CHARS = re.compile(r"[^a-z0-9._-]")


def _identifier_to_dirname(identifier: str) -> str:
    """Convert a user identifier to a safe directory name.

    ``Ada@Example.com`` → ``ada_at_example.com``
    """
    name = identifier.strip().lower().replace("@", "_at_")
    name = _UNSAFE_CHARS.sub("_", name).strip(".")
    if not name:
        raise ValueError(f"Unusable user identifier: {identifier!r}")
    return name


class LocalStore:
    """Persists string values under string keys in one JSON file."""

    def __init__(self, data_dir: Path) -> None:
        data_dir.mkdir(parents=True, exist_ok=True)
        self._path = data_dir / "local_storage.json"

    @classmethod
    def for_user(cls, data_dir: Path, identifier: str) -> "LocalStore":
        """Return the store kept apart for one signed-in user."""
        return cls(data_dir / "users" / _identifier_to_dirname(identifier))

    # ------------------------------------------------------------------
    # Raw key-value access
    # ------------------------------------------------------------------

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_for_update()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read_for_update()
        if key in data:
            del data[key]
            self._write(data)

    # ------------------------------------------------------------------
    # Typed records
    # ------------------------------------------------------------------

    def load_config(self) -> LLMConfig | None:
        """Return the saved LLMConfig, or None if absent or unreadable."""
        raw = self.get(CONFIG_KEY)
        if raw is None:
            return None
        try:
            return LLMConfig.from_json(raw)
        except ValueError:
            logger.exception("Error parsing saved config")
            return None

    def save_config(self, config: LLMConfig) -> None:
        self.set(CONFIG_KEY, config.to_json())

    def load_legacy_api_key(self) -> str | None:
        return self.get(LEGACY_API_KEY) or None

    def save_legacy_api_key(self, api_key: str) -> None:
        self.set(LEGACY_API_KEY, api_key)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read local storage %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _read_for_update(self) -> dict:
        """Read the records before changing one of them.

        Unlike ``_read`` this does not treat an unreadable file as empty, so
        a write cannot drop records it failed to see. A file that is not a
        JSON object is moved aside to ``*.corrupt`` first; an I/O error
        propagates.
        """
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except ValueError:
            data = None
        if isinstance(data, dict):
            return data
        backup = self._path.with_name(self._path.name + ".corrupt")
        self._path.replace(backup)
        logger.warning("Unreadable local storage moved to %s", backup)
        return {}

    def _write(self, data: dict) -> None:
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self._path)
