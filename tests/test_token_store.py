from __future__ import annotations

import json
from pathlib import Path

import pytest

from models.token import StoredToken
from services.errors import HomeDirectoryError, NotAuthenticatedError, TokenFormatError, TokenStoreError
from services.token_store import TokenStore
from utils.config import resolve_config_dir


@pytest.mark.parametrize("access_token", ["abc123", "ya29.a0AfH6SM-long_token", "ünïcödé"])
def test_token_store_roundtrip(token_store: TokenStore, access_token: str) -> None:
    token_store.save(StoredToken(access_token=access_token))
    assert token_store.load() == StoredToken(access_token=access_token)


def test_save_writes_pretty_json(token_store: TokenStore, config_dir: Path) -> None:
    path = token_store.save(StoredToken(access_token="abc123"))

    assert path == config_dir / "token.json"
    text = path.read_text(encoding="utf-8")
    assert json.loads(text) == {"access_token": "abc123"}
    assert text == '{\n  "access_token": "abc123"\n}'


def test_save_overwrites_existing_token(token_store: TokenStore) -> None:
    token_store.save(StoredToken(access_token="old"))
    token_store.save(StoredToken(access_token="new"))
    assert token_store.load().access_token == "new"


def test_load_without_token_file_requires_auth(token_store: TokenStore) -> None:
    assert token_store.exists() is False
    with pytest.raises(NotAuthenticatedError, match="femail auth"):
        token_store.load()


def test_load_rejects_corrupt_json(token_store: TokenStore) -> None:
    token_store.token_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(TokenFormatError):
        token_store.load()


def test_load_rejects_wrong_shape(token_store: TokenStore) -> None:
    token_store.token_path.write_text(json.dumps({"token": "abc"}), encoding="utf-8")
    with pytest.raises(TokenFormatError):
        token_store.load()


def test_config_dir_lives_under_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    config_dir = resolve_config_dir()

    assert config_dir == tmp_path / ".config" / "femail"
    assert config_dir.is_dir()


def test_config_dir_without_home(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HOME", raising=False)
    with pytest.raises(HomeDirectoryError):
        resolve_config_dir()


def test_save_maps_write_failure(token_store: TokenStore) -> None:
    token_store.token_path.mkdir()
    with pytest.raises(TokenStoreError, match="Could not write token file"):
        token_store.save(StoredToken(access_token="abc123"))


def test_config_dir_blocked_by_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    (tmp_path / ".config").mkdir()
    (tmp_path / ".config" / "femail").write_text("not a directory", encoding="utf-8")

    with pytest.raises(TokenStoreError, match="Could not create config directory"):
        resolve_config_dir()
