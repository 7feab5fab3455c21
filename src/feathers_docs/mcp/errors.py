"""Structured error system for MCP tools.

Provides typed exceptions with error codes and remediation hints so that
clients can tell a bad argument from an unsafe URI, a vanished page or a
failed repository sync.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from fastmcp.exceptions import ToolError


class MCPErrorCode(StrEnum):
    """Machine-readable error codes for MCP tool failures."""

    # Validation errors - client should fix input
    INVALID_PARAMS = "INVALID_PARAMS"
    INVALID_URI = "INVALID_URI"
    PATH_TRAVERSAL = "PATH_TRAVERSAL"

    # File errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    IO_ERROR = "IO_ERROR"

    # Repository errors
    SYNC_FAILED = "SYNC_FAILED"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class ErrorResponse:
    """Structured error response for MCP tools."""

    code: MCPErrorCode
    message: str
    remediation: str
    path: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code.value,
            "message": self.message,
            "remediation": self.remediation,
            "path": self.path,
            "context": self.context,
        }


class MCPError(ToolError):
    """Base exception for MCP tool errors with structured response.

    Extends FastMCP's ToolError so FastMCP passes it through unchanged
    instead of wrapping it in a generic ToolError.
    """

    def __init__(
        self,
        code: MCPErrorCode,
        message: str,
        remediation: str,
        path: str | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.remediation = remediation
        self.path = path
        self.context = context

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            code=self.code,
            message=self.message,
            remediation=self.remediation,
            path=self.path,
            context=self.context,
        )


# =============================================================================
# Specific Error Classes
# =============================================================================


class InvalidArgumentError(MCPError):
    """Raised when a tool argument is missing, mistyped or out of range."""

    def __init__(self, field_name: str, reason: str, value: Any = None) -> None:
        super().__init__(
            code=MCPErrorCode.INVALID_PARAMS,
            message=f"Invalid value for '{field_name}': {reason}",
            remediation="Check the tool's input schema and retry with a valid value.",
            field=field_name,
            value=None if value is None else str(value),
        )


class InvalidUriError(MCPError):
    """Raised when a page URI does not use the feathers-doc scheme."""

    def __init__(self, uri: str, reason: str | None = None) -> None:
        super().__init__(
            code=MCPErrorCode.INVALID_URI,
            message=f"Invalid URI: {uri}" + (f" ({reason})" if reason else ""),
            remediation="Use a URI returned by list_docs (feathers-doc://docs/<path>).",
            uri=uri,
        )


class PathTraversalError(MCPError):
    """Raised when a URI resolves outside the docs root."""

    def __init__(self, uri: str, docs_root: str) -> None:
        super().__init__(
            code=MCPErrorCode.PATH_TRAVERSAL,
            message="Path traversal detected",
            remediation="Use paths relative to the docs root. Do not use '..' to escape it.",
            uri=uri,
            docs_root=docs_root,
        )


class NotFoundError(MCPError):
    """Raised when a resolved page does not exist on disk."""

    def __init__(self, uri: str, path: str) -> None:
        super().__init__(
            code=MCPErrorCode.FILE_NOT_FOUND,
            message=f"Doc page not found: {uri}",
            remediation="Call list_docs for current URIs, or refresh_docs_index if the docs changed.",
            path=path,
            uri=uri,
        )


class ReadError(MCPError):
    """Raised when a page exists but cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            code=MCPErrorCode.IO_ERROR,
            message=f"Failed to read {path}: {reason}",
            remediation="Retry later; check file permissions in the docs cache.",
            path=path,
        )


class SyncError(MCPError):
    """Raised when repository synchronization fails during refresh."""

    def __init__(self, repo_url: str, branch: str, reason: str) -> None:
        super().__init__(
            code=MCPErrorCode.SYNC_FAILED,
            message=f"Failed to sync {repo_url}@{branch}: {reason}",
            remediation="The previous index is still served. Check network access and the configured branch.",
            repo_url=repo_url,
            branch=branch,
        )
