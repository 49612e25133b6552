"""Error taxonomy shared by the stores, the content clients and the API layer.

Every error carries the HTTP status it maps to and a user-facing message.
The API layer renders them as ``{"message": ...}`` bodies.
"""

from typing import Any, Dict, Optional


class MoodJournalError(Exception):
    status_code = 500

    def __init__(self, message: str, error: Any = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.error = error
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class InvalidInput(MoodJournalError):
    status_code = 400


class Conflict(MoodJournalError):
    status_code = 400


class NotFound(MoodJournalError):
    status_code = 400


class Unauthorized(MoodJournalError):
    status_code = 401


class StoreError(MoodJournalError):
    status_code = 500


class ProviderError(MoodJournalError):
    """Third-party API failure. ``error`` holds the provider payload, if any."""

    status_code = 500
