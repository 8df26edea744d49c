"""CORS settings and redaction of client-supplied secrets."""
from __future__ import annotations

import json
from typing import Any

# Compared case-insensitively, so "apiKey" and "api_key" are both covered.
_SENSITIVE_KEYS = {
    "password",
    "token",
    "access_token",
    "secret",
    "api_key",
    "apikey",
    "secretaccesskey",
    "authorization",
}


def cors_kwargs(origins: list[str]) -> dict:
    return {
        "allow_origins": origins,
        "allow_credentials": False,
        "allow_methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["Content-Type", "X-Request-Id"],
        "expose_headers": ["X-Request-Id"],
    }


def redact_value(value: Any) -> Any:
    if isinstance(value, dict):
        redacted = {}
        for key, item in value.items():
            if str(key).lower() in _SENSITIVE_KEYS:
                redacted[key] = "***"
            else:
                redacted[key] = redact_value(item)
        return redacted
    if isinstance(value, list):
        return [redact_value(item) for item in value]
    return value


def redacted_body_preview(body: bytes, content_type: str, max_bytes: int = 4096) -> str | None:
    """Short, secret-free text preview of a request body for error logs."""
    if not body:
        return None
    if "application/json" in content_type.lower():
        try:
            payload = json.loads(body.decode("utf-8", errors="replace"))
        except ValueError:
            return "<unparseable JSON body>"
        text = json.dumps(redact_value(payload), ensure_ascii=False)
    elif content_type.lower().startswith("text/"):
        text = body.decode("utf-8", errors="replace")
    else:
        return None
    if len(text) > max_bytes:
        return f"{text[:max_bytes]}…(truncated)"
    return text
