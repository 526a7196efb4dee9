from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Label:
    """A Gmail label, shown as a directory."""

    id: str
    name: str
    type: str | None = None
