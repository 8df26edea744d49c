"""Shared error types and the HTTP status classification for chat routes."""
from __future__ import annotations

import re

_AUTH_PATTERN = re.compile(r"auth|api[\s_-]?key", re.IGNORECASE)
_VALIDATION_PATTERN = re.compile(r"invalid|malformed|required|missing", re.IGNORECASE)


class ConfigurationError(Exception):
    """Provider selection cannot be turned into a model handle."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def error_message(exc: BaseException) -> str:
    """Return the human-readable text carried by an exception."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or exc.__class__.__name__


def classify_error(exc: BaseException) -> int:
    """Map a generation failure to 401, 400 or 500.

    Structured status codes on vendor exceptions are trusted first; free-form
    message text is only consulted when the status does not decide it.
    """
    status = getattr(exc, "status_code", None)
    if status in (401, 403):
        return 401

    message = error_message(exc)
    if _AUTH_PATTERN.search(message):
        return 401

    if status in (400, 404, 422) or exc.__class__.__name__ == "ValidationError":
        return 400
    if _VALIDATION_PATTERN.search(message):
        return 400
    return 500
