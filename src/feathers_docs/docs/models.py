"""Data models for the docs index and its query results.

Internal names are snake_case; ``to_dict`` produces the camelCase wire
format returned by the MCP tools.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from feathers_docs.config.constants import (
    LIST_LIMIT_MAX,
    LIST_LIMIT_MIN,
    RESULT_HEADINGS_MAX,
)


@dataclass(frozen=True, slots=True)
class PageRecord:
    """One markdown page of the docs root."""

    uri: str
    title: str
    relative_path: str  # POSIX separators, relative to docs root
    headings: tuple[str, ...]
    checksum: str  # sha256 of the raw file bytes
    last_modified: int  # ms since epoch

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match on title, path or any heading.

        ``needle`` must already be lowercased.
        """
        return (
            needle in self.title.lower()
            or needle in self.relative_path.lower()
            or any(needle in heading.lower() for heading in self.headings)
        )

    def summary(self) -> PageSummary:
        return PageSummary(
            uri=self.uri,
            title=self.title,
            relative_path=self.relative_path,
            headings=self.headings[:RESULT_HEADINGS_MAX],
        )


@dataclass(frozen=True, slots=True)
class PageSummary:
    """Reduced page entry used in list results and groups."""

    uri: str
    title: str
    relative_path: str
    headings: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "uri": self.uri,
            "title": self.title,
            "relativePath": self.relative_path,
            "headings": list(self.headings),
        }


@dataclass(frozen=True, slots=True)
class IndexState:
    """Immutable snapshot of the index. Replaced wholesale on refresh."""

    pages: tuple[PageRecord, ...]
    commit: str
    last_sync_at: str | None  # ISO-8601 UTC, None before first refresh
    docs_dir_resolved: Path
    discovery_warnings: tuple[str, ...]

    @classmethod
    def empty(cls, docs_dir: Path) -> IndexState:
        return cls(
            pages=(),
            commit="",
            last_sync_at=None,
            docs_dir_resolved=docs_dir,
            discovery_warnings=(),
        )


class ListQuery(BaseModel):
    """Validated list_docs arguments."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    query: str | None = None
    limit: int = Field(..., ge=LIST_LIMIT_MIN, le=LIST_LIMIT_MAX, strict=True)
    offset: int = Field(0, ge=0, strict=True)

    @property
    def needle(self) -> str | None:
        """Normalized filter text, or None when every page matches."""
        if self.query is None:
            return None
        return self.query.strip().lower() or None


@dataclass
class PageGroup:
    """Pages sharing one parent folder."""

    folder: str
    pages: list[PageSummary] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.pages)

    def to_dict(self) -> dict[str, Any]:
        return {
            "folder": self.folder,
            "count": self.count,
            "pages": [p.to_dict() for p in self.pages],
        }


@dataclass
class ListResult:
    """Result of list_docs."""

    query: str | None
    total: int
    offset: int
    limit: int
    results: list[PageSummary]
    groups: list[PageGroup]

    @property
    def count(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "total": self.total,
            "offset": self.offset,
            "limit": self.limit,
            "count": self.count,
            "results": [r.to_dict() for r in self.results],
            "groups": [g.to_dict() for g in self.groups],
        }


@dataclass
class ReadResult:
    """Result of read_doc."""

    uri: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"uri": self.uri, "content": self.content}


@dataclass
class RefreshResult:
    """Result of refresh_docs_index."""

    force_rebuild: bool
    commit: str
    last_sync_at: str | None
    pages: int
    changed: bool
    ok: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "forceRebuild": self.force_rebuild,
            "commit": self.commit,
            "lastSyncAt": self.last_sync_at,
            "pages": self.pages,
            "changed": self.changed,
        }


@dataclass
class StatusResult:
    """Result of get_docs_status."""

    repo_url: str
    branch: str
    commit: str
    last_sync_at: str | None
    pages: int
    docs_dir_resolved: str
    docs_dir_exists: bool
    discovery_warnings: list[str]
    cache_dir: str
    last_sync_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "repoUrl": self.repo_url,
            "branch": self.branch,
            "commit": self.commit,
            "lastSyncAt": self.last_sync_at,
            "pages": self.pages,
            "docsDirResolved": self.docs_dir_resolved,
            "docsDirExists": self.docs_dir_exists,
            "discoveryWarnings": list(self.discovery_warnings),
            "cacheDir": self.cache_dir,
            "lastSyncError": self.last_sync_error,
        }
