from __future__ import annotations

import base64
import html
import json
import logging
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Sequence

import httplib2
from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from models.email_message import EmailMessage
from models.label import Label
from services.errors import ApiError
from services.token_store import TokenStore

LOGGER = logging.getLogger(__name__)
METADATA_HEADERS = ("Subject", "From", "Date")


class GmailClient:
    """Read-only wrapper around the Gmail API, authorised by a stored bearer token."""

    def __init__(
        self,
        token_store: TokenStore,
        user_id: str = "me",
        max_results: int = 20,
        http: httplib2.Http | None = None,
    ):
        self._user_id = user_id
        self._max_results = max_results
        token = token_store.load()
        self.credentials = Credentials(token=token.access_token)
        if http is not None:
            self._client = build("gmail", "v1", http=http, cache_discovery=False)
        else:
            self._client = build("gmail", "v1", credentials=self.credentials, cache_discovery=False)

    @property
    def user_id(self) -> str:
        return self._user_id

    def list_labels(self) -> List[Label]:
        request = self._client.users().labels().list(userId=self.user_id)
        response = self._execute(request, "list labels")
        labels = [
            Label(id=item["id"], name=item.get("name", item["id"]), type=item.get("type"))
            for item in response.get("labels", [])
        ]
        LOGGER.info("Fetched %s labels", len(labels))
        return labels

    def list_messages(self, label_id: str) -> List[EmailMessage]:
        request = (
            self._client.users()
            .messages()
            .list(userId=self.user_id, labelIds=[label_id], maxResults=self._max_results)
        )
        response = self._execute(request, f"list messages in {label_id}")
        messages = response.get("messages", [])
        LOGGER.info("Fetched %s message headers from %s", len(messages), label_id)
        return [self._fetch_summary(message["id"]) for message in messages]

    def get_message_content(self, message_id: str) -> str:
        request = (
            self._client.users()
            .messages()
            .get(userId=self.user_id, id=message_id, format="full")
        )
        response = self._execute(request, f"fetch message {message_id}")
        body = _extract_body(response.get("payload", {}))
        if not body:
            LOGGER.debug("Message %s has no decodable body, using snippet", message_id)
            body = html.unescape(response.get("snippet", ""))
        return body

    def _fetch_summary(self, message_id: str) -> EmailMessage:
        request = (
            self._client.users()
            .messages()
            .get(
                userId=self.user_id,
                id=message_id,
                format="metadata",
                metadataHeaders=list(METADATA_HEADERS),
            )
        )
        response = self._execute(request, f"fetch message {message_id}")
        headers = _headers_to_dict(response.get("payload", {}).get("headers", []))
        received_at = None
        if date_header := headers.get("date"):
            try:
                received_at = parsedate_to_datetime(date_header)
            except (TypeError, ValueError):
                LOGGER.debug("Unable to parse date header: %s", date_header)
        return EmailMessage(
            id=response.get("id", message_id),
            thread_id=response.get("threadId"),
            subject=headers.get("subject") or "(no subject)",
            snippet=html.unescape(response.get("snippet", "")),
            sender=headers.get("from") or "Unknown",
            labels=response.get("labelIds", []),
            received_at=received_at,
        )

    def _execute(self, request, action: str) -> Dict[str, Any]:
        try:
            response = request.execute()
        except HttpError as exc:
            body = _decode_error_body(exc.content)
            LOGGER.error("Failed to %s: HTTP %s %s", action, exc.resp.status, body)
            raise ApiError(
                f"Failed to {action}: {_error_message(body)}",
                status=exc.resp.status,
                body=body,
            ) from exc
        except RefreshError as exc:
            LOGGER.error("Access token rejected while trying to %s: %s", action, exc)
            raise ApiError(
                f"Failed to {action}: access token was rejected, run 'femail auth' again",
                status=401,
            ) from exc
        except ValueError as exc:
            LOGGER.error("Malformed response while trying to %s: %s", action, exc)
            raise ApiError(f"Failed to {action}: malformed response from Gmail") from exc
        except (httplib2.HttpLib2Error, OSError) as exc:
            LOGGER.error("Transport failure while trying to %s: %s", action, exc)
            raise ApiError(f"Failed to {action}: {exc}") from exc

        if not isinstance(response, dict):
            LOGGER.error("Unexpected %s response while trying to %s", type(response).__name__, action)
            raise ApiError(f"Failed to {action}: malformed response from Gmail")
        return response


def _headers_to_dict(headers: Sequence[Dict[str, str]]) -> Dict[str, str]:
    mapped: Dict[str, str] = {}
    for header in headers:
        name = header.get("name", "").lower()
        value = header.get("value", "")
        mapped[name] = value
    return mapped


def _extract_body(payload: Dict) -> str:
    plain = _find_part(payload, "text/plain")
    if plain:
        return plain
    return _find_part(payload, "text/html")


def _find_part(payload: Dict, mime_type: str) -> str:
    parts = payload.get("parts") or []
    if not parts:
        data = payload.get("body", {}).get("data")
        if data and payload.get("mimeType", mime_type) == mime_type:
            return _decode_base64(data)
        return ""
    for part in parts:
        found = _find_part(part, mime_type)
        if found:
            return found
    return ""


def _decode_base64(data: str) -> str:
    padded = data + "=" * (-len(data) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except ValueError:
        return ""
    return raw.decode("utf-8", errors="replace")


def _decode_error_body(content: bytes | str | None) -> str:
    if content is None:
        return ""
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return content


def _error_message(body: str) -> str:
    try:
        return json.loads(body)["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return body or "no details returned"
