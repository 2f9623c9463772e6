"""ReviewPlane error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Session / comments
- 4xxx: Reviewer
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Session (3xxx)
    SESSION_ALREADY_ACTIVE = 3001
    SESSION_NOT_ACTIVE = 3002
    COMMENT_NOT_FOUND = 3003
    COMMENT_NOT_AUTHOR = 3004

    # Reviewer (4xxx)
    REVIEWER_UNAVAILABLE = 4001
    REVIEWER_FAILED = 4002
    REVIEWER_TIMEOUT = 4003
    RESPONSE_NO_JSON = 4101
    RESPONSE_INVALID_JSON = 4102
    RESPONSE_INVALID_FIELD = 4103

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class ReviewPlaneError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'REVIEWER_TIMEOUT')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(ReviewPlaneError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class SessionError(ReviewPlaneError):
    """Review session lifecycle and comment ownership errors."""

    @classmethod
    def already_active(cls, session_id: str) -> "SessionError":
        return cls(
            code=ErrorCode.SESSION_ALREADY_ACTIVE,
            message=f"A review session is already active ({session_id}); end it first",
            details={"session_id": session_id},
        )

    @classmethod
    def no_active(cls) -> "SessionError":
        return cls(
            code=ErrorCode.SESSION_NOT_ACTIVE,
            message="No active review session",
        )

    @classmethod
    def comment_not_found(cls, comment_id: int) -> "SessionError":
        return cls(
            code=ErrorCode.COMMENT_NOT_FOUND,
            message=f"Comment not found: {comment_id}",
            details={"comment_id": comment_id},
        )

    @classmethod
    def not_author(cls, comment_id: int, user: str | None) -> "SessionError":
        return cls(
            code=ErrorCode.COMMENT_NOT_AUTHOR,
            message=f"Only the author may modify comment {comment_id}",
            details={"comment_id": comment_id, "user": user},
        )


class ReviewerError(ReviewPlaneError):
    """The external reviewer could not produce output."""

    @classmethod
    def unavailable(cls, command: str, reason: str) -> "ReviewerError":
        return cls(
            code=ErrorCode.REVIEWER_UNAVAILABLE,
            message=f"Reviewer command '{command}' could not be started: {reason}",
            details={"command": command, "reason": reason},
        )

    @classmethod
    def command_failed(cls, command: str, returncode: int, stderr: str) -> "ReviewerError":
        return cls(
            code=ErrorCode.REVIEWER_FAILED,
            message=f"{command} failed (exit {returncode}): {stderr.strip()}",
            retryable=True,
            details={"command": command, "returncode": returncode, "stderr": stderr},
        )

    @classmethod
    def timeout(cls, command: str, timeout_sec: float) -> "ReviewerError":
        return cls(
            code=ErrorCode.REVIEWER_TIMEOUT,
            message=f"{command} did not finish within {timeout_sec:g}s",
            retryable=True,
            details={"command": command, "timeout_sec": timeout_sec},
        )


class ResponseParseError(ReviewPlaneError):
    """Reviewer output that cannot be trusted as a walkthrough."""

    @property
    def field_path(self) -> str | None:
        return self.details.get("field")

    @classmethod
    def no_json(cls) -> "ResponseParseError":
        return cls(
            code=ErrorCode.RESPONSE_NO_JSON,
            message="No JSON object found in response",
        )

    @classmethod
    def invalid_json(cls, reason: str) -> "ResponseParseError":
        return cls(
            code=ErrorCode.RESPONSE_INVALID_JSON,
            message=f"Failed to parse JSON: {reason}",
            details={"reason": reason},
        )

    @classmethod
    def invalid_field(cls, path: str, reason: str) -> "ResponseParseError":
        return cls(
            code=ErrorCode.RESPONSE_INVALID_FIELD,
            message=f"{path}: {reason}",
            details={"field": path, "reason": reason},
        )


class InternalError(ReviewPlaneError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
