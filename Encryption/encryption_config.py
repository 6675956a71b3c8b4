"""
ENCRYPTION CONFIG
=================
Field encryption settings loaded from environment.
"""

# FLOW:
# - Load the active .env file, then read env vars into ENCRYPTION_SETTINGS.
# WHY:
# - One place decides cipher transformation, IV, key variable and logging.
# HOW:
# - python-dotenv + os.getenv, same env-file selection as the rest of the app.

from __future__ import annotations

import logging
import os

import dotenv


def get_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).lower() == "true"


def _is_active(path: str) -> bool:
    """True when the env file sets ENV_ACTIVE=true."""
    if not os.path.exists(path):
        return False
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            if line.strip().startswith("ENV_ACTIVE="):
                return line.split("=", 1)[1].strip().strip('"').lower() == "true"
    return False


def _env_name() -> str:
    env = os.getenv("APP_ENV", "").strip().lower()
    if env in {"prod", "production"}:
        return ".env.production"
    if env in {"local", "localhost", "dev", "development"}:
        return ".env.localhost"
    # Without APP_ENV, an active production file wins.
    if _is_active(os.path.join(_root(), ".env.production")):
        return ".env.production"
    return ".env.localhost"


def _root() -> str:
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def env_path() -> str:
    return os.path.join(_root(), _env_name())


def load_environment() -> None:
    dotenv.load_dotenv(env_path())


DEFAULT_TRANSFORMATION = "AES/CBC/PKCS5Padding"
DEFAULT_KEY_ENV_NAME = "DATABASE_ENCRYPTION_KEY"


def load_settings() -> dict:
    """Read settings from the current environment (after dotenv)."""
    load_environment()
    return {
        "CIPHER_TRANSFORMATION": os.getenv("DATABASE_ENCRYPTION_TRANSFORMATION", DEFAULT_TRANSFORMATION),
        "CIPHER_IV": os.getenv("DATABASE_ENCRYPTION_IV") or None,
        "KEY_ENV_NAME": os.getenv("DATABASE_ENCRYPTION_KEY_ENV", DEFAULT_KEY_ENV_NAME),
        "LOG_FILE": os.getenv("ENCRYPTION_LOG_FILE") or None,
        "METRICS_ENABLED": get_bool("PROMETHEUS_ENABLED", True),
    }


ENCRYPTION_SETTINGS = load_settings()

# Optional startup log
if os.getenv("APP_ENV_LOG", "false").lower() == "true":
    logging.getLogger("encryption.env").info("Active env file: %s", env_path())
