from __future__ import annotations

from typing import List

from models.email_message import EmailMessage
from models.label import Label
from services.gmail_service import GmailClient


class GmailFilesystem:
    """Labels as directories, messages as files."""

    def __init__(self, client: GmailClient):
        self._client = client

    def list_labels(self) -> List[Label]:
        return self._client.list_labels()

    def list_messages(self, label_id: str) -> List[EmailMessage]:
        return self._client.list_messages(label_id)

    def read_message(self, message_id: str) -> str:
        return self._client.get_message_content(message_id)
