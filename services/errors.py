from __future__ import annotations


class FemailError(Exception):
    """Base class for every error a command reports to the user."""


class HomeDirectoryError(FemailError):
    """The user's home directory could not be determined."""


class TokenStoreError(FemailError):
    """Reading or writing the token file failed."""


class TokenFormatError(FemailError):
    """The token file exists but does not hold a valid token."""


class NotAuthenticatedError(FemailError):
    """No token has been stored yet."""


class ApiError(FemailError):
    """A Gmail API request failed or returned something unreadable."""

    def __init__(self, message: str, status: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        message = super().__str__()
        if self.status is None:
            return message
        return f"{message} (HTTP {self.status})"
