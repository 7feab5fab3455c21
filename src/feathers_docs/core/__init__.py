"""Core module exports."""

from feathers_docs.core.errors import (
    ConfigError,
    DocsServerError,
    ErrorCode,
    InternalError,
)
from feathers_docs.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Errors
    "DocsServerError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
