from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from services.errors import TokenFormatError


@dataclass(slots=True)
class StoredToken:
    """Bearer token persisted between invocations."""

    access_token: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> "StoredToken":
        if not isinstance(data, dict):
            raise TokenFormatError("Token file must contain a JSON object")
        access_token = data.get("access_token")
        if not isinstance(access_token, str):
            raise TokenFormatError("Token file is missing an 'access_token' string")
        return cls(access_token=access_token)
