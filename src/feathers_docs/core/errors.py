"""Errors raised outside tool calls: config loading and unexpected failures.

Tool-facing errors (bad arguments, unsafe URIs, unreadable pages, failed
syncs) live in ``feathers_docs.mcp.errors``.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any


class ErrorCode(IntEnum):
    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class DocsServerError(Exception):
    """Base error; ``details`` holds the structured fields logged and returned."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(DocsServerError):
    """Config file or environment could not be turned into a DocsServerConfig."""

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

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class InternalError(DocsServerError):
    """A tool handler failed in a way no MCPError describes."""

    @classmethod
    def unexpected(
        cls, reason: str, *, tool: str, log_file: Path | None = None
    ) -> "InternalError":
        """Wrap an unexpected failure of ``tool``.

        ``log_file`` points the client at the full traceback when logging
        writes to a file.
        """
        details: dict[str, Any] = {"tool": tool}
        if log_file is not None:
            details["log_file"] = str(log_file)
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
