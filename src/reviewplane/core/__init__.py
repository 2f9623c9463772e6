"""Core module exports."""

from reviewplane.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    ResponseParseError,
    ReviewerError,
    ReviewPlaneError,
    SessionError,
)
from reviewplane.core.logging import (
    bind_session_id,
    clear_session_id,
    configure_logging,
    get_logger,
    get_session_id,
)
from reviewplane.core.progress import spinner, status

__all__ = [
    # Errors
    "ErrorCode",
    "ReviewPlaneError",
    "ConfigError",
    "SessionError",
    "ReviewerError",
    "ResponseParseError",
    "InternalError",
    # Logging
    "bind_session_id",
    "clear_session_id",
    "configure_logging",
    "get_logger",
    "get_session_id",
    # Progress
    "spinner",
    "status",
]
