from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable

from models.token import StoredToken
from services.errors import NotAuthenticatedError, TokenFormatError, TokenStoreError
from utils.config import resolve_config_dir

LOGGER = logging.getLogger(__name__)
TOKEN_FILE_NAME = "token.json"


class TokenStore:
    """JSON file holding the bearer token pasted in by ``femail auth``."""

    def __init__(
        self,
        config_dir_resolver: Callable[[], Path] = resolve_config_dir,
        file_name: str = TOKEN_FILE_NAME,
    ):
        self._config_dir_resolver = config_dir_resolver
        self._file_name = file_name

    def config_dir(self) -> Path:
        return self._config_dir_resolver()

    @property
    def token_path(self) -> Path:
        return self.config_dir() / self._file_name

    def exists(self) -> bool:
        return self.token_path.exists()

    def save(self, token: StoredToken) -> Path:
        token_path = self.token_path
        try:
            payload = json.dumps(token.to_dict(), indent=2)
            token_path.write_text(payload, encoding="utf-8")
        except (OSError, TypeError) as exc:
            raise TokenStoreError(f"Could not write token file {token_path}: {exc}") from exc
        LOGGER.debug("Persisted access token to %s", token_path)
        return token_path

    def load(self) -> StoredToken:
        token_path = self.token_path
        if not token_path.exists():
            raise NotAuthenticatedError("Token file not found. Please run 'femail auth' first.")

        LOGGER.debug("Loading access token from %s", token_path)
        try:
            data = token_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise TokenStoreError(f"Could not read token file {token_path}: {exc}") from exc
        try:
            payload = json.loads(data)
        except json.JSONDecodeError as exc:
            raise TokenFormatError(f"Token file {token_path} is not valid JSON: {exc}") from exc
        return StoredToken.from_dict(payload)
