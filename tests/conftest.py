from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Iterable, Tuple

import pytest
from googleapiclient.http import HttpMockSequence
from rich.console import Console

from main import AppContext
from models.token import StoredToken
from services.gmail_service import GmailClient
from services.token_store import TokenStore

Reply = Tuple[dict, str]


@pytest.fixture
def ok() -> Callable[[object], Reply]:
    def reply(payload) -> Reply:
        return {"status": "200"}, json.dumps(payload)

    return reply


@pytest.fixture
def error() -> Callable[[int, str], Reply]:
    def reply(status: int, message: str) -> Reply:
        body = {"error": {"code": status, "message": message, "errors": [{"message": message}]}}
        return {"status": str(status)}, json.dumps(body)

    return reply


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    return tmp_path / "config"


@pytest.fixture
def token_store(config_dir: Path) -> TokenStore:
    def resolver() -> Path:
        config_dir.mkdir(parents=True, exist_ok=True)
        return config_dir

    return TokenStore(config_dir_resolver=resolver)


@pytest.fixture
def authed_store(token_store: TokenStore) -> TokenStore:
    token_store.save(StoredToken(access_token="abc123"))
    return token_store


@pytest.fixture
def make_app() -> Callable[..., AppContext]:
    """Build an AppContext whose Gmail client replays ``responses`` in order."""

    def build(token_store: TokenStore, responses: Iterable[Reply] = ()) -> AppContext:
        replies = list(responses)

        def client_factory() -> GmailClient:
            return GmailClient(token_store, http=HttpMockSequence(list(replies)))

        return AppContext(
            console=Console(soft_wrap=True),
            token_store=token_store,
            client_factory=client_factory,
        )

    return build
