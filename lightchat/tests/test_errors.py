import pytest
from pydantic import BaseModel, ValidationError

from lightchat.app.core.errors import ConfigurationError, classify_error, error_message
from lightchat.app.core.security import redact_value, redacted_body_preview


class StatusError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


class Strict(BaseModel):
    count: int


@pytest.mark.parametrize(
    "exc, expected",
    [
        (Exception("invalid api key"), 401),
        (Exception("Invalid API-Key supplied"), 401),
        (Exception("Authentication failed"), 401),
        (StatusError("forbidden", 403), 401),
        (StatusError("nope", 401), 401),
        (StatusError("Model not found", 404), 400),
        (StatusError("bad request", 400), 400),
        (Exception("messages: field required"), 400),
        (Exception("Malformed tool schema"), 400),
        (StatusError("Rate limit exceeded", 429), 500),
        (Exception("Service unavailable"), 500),
        (RuntimeError(), 500),
    ],
)
def test_classify_error(exc, expected):
    assert classify_error(exc) == expected


def test_classify_words_containing_key_are_not_auth():
    # Words that merely contain "key" are not credential failures.
    assert classify_error(Exception("monkey business")) == 500


def test_classify_pydantic_validation_error():
    with pytest.raises(ValidationError) as exc_info:
        Strict.model_validate({"count": "many"})
    assert classify_error(exc_info.value) == 400


def test_error_message_prefers_message_attribute():
    assert error_message(ConfigurationError("Azure requires a resource name in extra config.")) == (
        "Azure requires a resource name in extra config."
    )
    assert error_message(ValueError("plain")) == "plain"
    assert error_message(TimeoutError()) == "TimeoutError"


def test_redaction_covers_credentials():
    body = {
        "provider": "amazon-bedrock",
        "apiKey": "AKIA-secret",
        "extraConfig": {"secretAccessKey": "very-secret", "region": "us-east-1"},
    }

    assert redact_value(body) == {
        "provider": "amazon-bedrock",
        "apiKey": "***",
        "extraConfig": {"secretAccessKey": "***", "region": "us-east-1"},
    }

    preview = redacted_body_preview(b'{"apiKey": "sk-live"}', "application/json")
    assert "sk-live" not in preview
    assert redacted_body_preview(b"{broken", "application/json") == "<unparseable JSON body>"
    assert redacted_body_preview(b"", "application/json") is None
