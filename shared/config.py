"""Configuration helpers for environment variables."""

from __future__ import annotations

import os
import logging
from pathlib import Path

from dotenv import load_dotenv


logger = logging.getLogger(__name__)


_STORAGE_BACKENDS = {"memory", "file", "none"}


def _should_load_dotenv() -> bool:
    """Return whether local dotenv loading should run."""
    app_env = os.getenv("APP_ENV", "dev").strip().lower()
    return app_env in {"dev", "local"}


if _should_load_dotenv():
    load_dotenv()


def get_env(name: str, default: str | None = None) -> str | None:
    """Return a raw environment value or default."""
    return os.getenv(name, default)


def app_env() -> str:
    """Return the current application environment."""
    return (get_env("APP_ENV", "dev") or "dev").strip() or "dev"


def cors_allow_origins() -> list[str]:
    """Return CORS allowed origins from env with safe environment defaults."""
    raw_origins = get_env("CORS_ALLOW_ORIGINS", "") or ""
    parsed_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

    if parsed_origins:
        return parsed_origins

    if app_env().strip().lower() in {"dev", "local"}:
        return ["http://localhost:3000", "http://127.0.0.1:3000"]

    logger.warning(
        "cors_allow_origins_empty_in_prod app_env=%s; define CORS_ALLOW_ORIGINS",
        app_env(),
    )

    return []


def storage_backend() -> str:
    """Return the key-value storage backend: memory, file or none."""
    raw_value = (get_env("EXPENSE_TRACKER_STORAGE", "memory") or "memory").strip().lower()
    if raw_value in _STORAGE_BACKENDS:
        return raw_value

    logger.warning("storage_backend_unknown value=%s; falling back to memory", raw_value)
    return "memory"


def data_file() -> Path:
    """Return the JSON file used by the file storage backend."""
    raw_value = (get_env("EXPENSE_TRACKER_DATA_FILE", "") or "").strip()
    if raw_value:
        return Path(raw_value).expanduser()
    return Path.home() / ".expense-tracker" / "storage.json"


def storage_key_prefix() -> str:
    """Return the prefix used to build collection storage keys."""
    return (get_env("EXPENSE_TRACKER_KEY_PREFIX", "expense-tracker") or "expense-tracker").strip() or "expense-tracker"


def currency() -> str:
    """Return the display currency code used in reports."""
    raw_value = (get_env("EXPENSE_TRACKER_CURRENCY", "USD") or "USD").strip().upper()
    if len(raw_value) != 3 or not raw_value.isalpha():
        logger.warning("currency_invalid value=%s; falling back to USD", raw_value)
        return "USD"
    return raw_value
