"""Central API key manager.

All provider credentials are read through this module rather than
``os.getenv`` so that:

  1. values are cached after the first read,
  2. every known value can be scrubbed from log lines and exception text,
  3. tests can force a reload after changing the environment.
"""

from __future__ import annotations

import os
from typing import Optional

from mapcache.security.redact import redact_sensitive
from mapcache.shared.exceptions import KeyMissingError

MAPBOX_TOKEN_ENV = "MAPBOX_ACCESS_TOKEN"


class KeyManager:
    """Process-wide key registry."""

    def __init__(self):
        self._keys: dict[str, str] = {}

    def get(self, name: str, *, required: bool = False) -> Optional[str]:
        """Return the key called ``name``, loading it from the environment on first use."""
        value = self._keys.get(name)
        if value is None:
            value = os.getenv(name, "")
            if value:
                self._keys[name] = value
            elif required:
                raise KeyMissingError(name)
            else:
                return None
        return value

    def get_mapbox_token(self, *, required: bool = True) -> str:
        val = self.get(MAPBOX_TOKEN_ENV, required=required)
        return val or ""

    def scrub_text(self, text: str) -> str:
        """Erase every loaded key value from ``text``, then apply pattern redaction."""
        result = str(text) if text is not None else ""
        for name, value in self._keys.items():
            if value in result:
                result = result.replace(value, f"[{name}:***REDACTED***]")
        return redact_sensitive(result)

    def has_key(self, name: str) -> bool:
        """Check for a key without caching it."""
        if name in self._keys:
            return True
        return bool(os.getenv(name, ""))

    def reload(self, name: str) -> None:
        """Re-read ``name`` from the environment (key rotation, tests)."""
        raw = os.getenv(name, "")
        if raw:
            self._keys[name] = raw
        else:
            self._keys.pop(name, None)


_manager: Optional[KeyManager] = None


def get_key_manager() -> KeyManager:
    global _manager
    if _manager is None:
        _manager = KeyManager()
    return _manager
