from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List


@dataclass(slots=True)
class EmailMessage:
    """Summary of a Gmail message as listed inside a label."""

    id: str
    thread_id: str | None
    subject: str
    snippet: str
    sender: str = "Unknown"
    labels: List[str] = field(default_factory=list)
    received_at: datetime | None = None
