from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from services.errors import HomeDirectoryError, TokenStoreError


APP_NAME = "femail"


@dataclass(slots=True)
class AppConfig:
    log_level: str
    user_id: str
    fetch_batch_size: int
    app_name: str = APP_NAME


def resolve_config_dir(app_name: str = APP_NAME) -> Path:
    """Return ``$HOME/.config/<app_name>``, creating it when missing."""

    home = os.getenv("HOME")
    if not home:
        raise HomeDirectoryError("Could not determine home directory")
    config_dir = Path(home) / ".config" / app_name
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise TokenStoreError(f"Could not create config directory {config_dir}: {exc}") from exc
    return config_dir


def load_config(env_file: str | os.PathLike[str] | None = None) -> AppConfig:
    """Load configuration values from a .env file and environment variables."""

    if env_file:
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(override=False)

    raw_batch_size = os.getenv("FETCH_BATCH_SIZE", "20")
    try:
        fetch_batch_size = int(raw_batch_size)
    except ValueError as exc:
        raise ValueError(f"FETCH_BATCH_SIZE must be an integer, got {raw_batch_size!r}") from exc
    if fetch_batch_size < 1:
        raise ValueError(f"FETCH_BATCH_SIZE must be positive, got {fetch_batch_size}")

    return AppConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        user_id=os.getenv("GMAIL_USER_ID", "me"),
        fetch_batch_size=fetch_batch_size,
    )
