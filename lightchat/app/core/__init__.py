from .errors import ConfigurationError, classify_error, error_message
from .logging import request_id_var, setup_logging
from .security import cors_kwargs, redact_value, redacted_body_preview

__all__ = [
    "ConfigurationError",
    "classify_error",
    "error_message",
    "request_id_var",
    "setup_logging",
    "cors_kwargs",
    "redact_value",
    "redacted_body_preview",
]
