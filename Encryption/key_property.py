"""
DATABASE ENCRYPTION KEY
=======================
Holder for the current field encryption key.
"""

# FLOW:
# - KeyProperty.from_env() reads DATABASE_ENCRYPTION_KEY after dotenv.
# - Converters call get() once per conversion and use that snapshot.
# WHY:
# - The key can change at runtime; each call must see one consistent value.
# HOW:
# - Lock-guarded attribute, injected into converters at construction.

from __future__ import annotations

import os
import threading

from Encryption.encryption_config import ENCRYPTION_SETTINGS, load_environment


class KeyProperty:
    def __init__(self, key: str | None = None):
        self._lock = threading.Lock()
        self._key = key

    @classmethod
    def from_env(cls, env_name: str | None = None) -> "KeyProperty":
        load_environment()
        name = env_name or ENCRYPTION_SETTINGS["KEY_ENV_NAME"]
        return cls(os.getenv(name))

    def get(self) -> str | None:
        with self._lock:
            return self._key

    def set(self, key: str | None) -> None:
        with self._lock:
            self._key = key

    def is_configured(self) -> bool:
        return bool(self.get())

    def __repr__(self) -> str:
        state = "set" if self.is_configured() else "unset"
        return f"KeyProperty({state})"


_DEFAULT: KeyProperty | None = None
_DEFAULT_LOCK = threading.Lock()


def get_key_property() -> KeyProperty:
    """Process-wide holder, created from the environment on first use."""
    global _DEFAULT
    with _DEFAULT_LOCK:
        if _DEFAULT is None:
            _DEFAULT = KeyProperty.from_env()
        return _DEFAULT


def reset_key_property() -> None:
    global _DEFAULT
    with _DEFAULT_LOCK:
        _DEFAULT = None
