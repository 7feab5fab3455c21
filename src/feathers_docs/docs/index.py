"""In-memory docs index: refresh lifecycle and query operations.

The index keeps one immutable ``IndexState`` snapshot. Queries read the
current snapshot reference once and work on it; refresh builds a complete
replacement in a worker thread and publishes it with a single assignment.

- refresh_lock: only ONE refresh at a time, so the published state is always
  the result of exactly one build. Readers never take it.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path, PurePosixPath

import structlog
from pydantic import ValidationError

from feathers_docs.config.constants import ROOT_GROUP
from feathers_docs.config.models import DocsServerConfig
from feathers_docs.docs.discovery import discover_markdown_files
from feathers_docs.docs.models import (
    IndexState,
    ListQuery,
    ListResult,
    PageGroup,
    PageRecord,
    ReadResult,
    RefreshResult,
    StatusResult,
)
from feathers_docs.docs.parser import parse_page
from feathers_docs.docs.uri import decode_uri, resource_path_to_uri
from feathers_docs.git import GitError, RepoSync, SyncResult
from feathers_docs.mcp.errors import (
    InvalidArgumentError,
    NotFoundError,
    ReadError,
    SyncError,
)

log = structlog.get_logger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def group_pages(pages: Iterable[PageRecord]) -> list[PageGroup]:
    """Group pages by parent folder (``/`` for the docs root).

    Groups are ordered by folder, pages inside a group by relative path.
    """
    by_folder: dict[str, list[PageRecord]] = defaultdict(list)
    for page in pages:
        parent = str(PurePosixPath(page.relative_path).parent)
        by_folder[ROOT_GROUP if parent == "." else parent].append(page)

    return [
        PageGroup(
            folder=folder,
            pages=[p.summary() for p in sorted(members, key=lambda p: p.relative_path)],
        )
        for folder, members in sorted(by_folder.items())
    ]


class DocsIndex:
    """Owns the index snapshot and serves list/read/refresh/status."""

    def __init__(self, config: DocsServerConfig, syncer: RepoSync | None = None) -> None:
        self._repo_url = config.repo.url
        self._branch = config.repo.branch
        self._cache_dir = config.repo.cache_path
        self._docs_dir = config.repo.docs_dir
        self._top_k = config.limits.top_k
        self._syncer = syncer or RepoSync(
            config.repo.url,
            config.repo.branch,
            config.repo.repo_dir,
            depth=config.repo.depth,
        )
        self._state = IndexState.empty(self._docs_dir)
        self._refresh_lock = asyncio.Lock()
        self._last_sync_error: str | None = None

    @property
    def state(self) -> IndexState:
        """Current snapshot. Never mutated; replaced by refresh."""
        return self._state

    @property
    def docs_dir(self) -> Path:
        return self._docs_dir

    # =========================================================================
    # Refresh
    # =========================================================================

    async def refresh(self, force_rebuild: bool = False) -> RefreshResult:
        """Sync the repository and rebuild the index wholesale.

        ``force_rebuild`` is advisory: every refresh already rebuilds.

        Raises:
            SyncError: Repository sync failed. The previous snapshot stays live.
        """
        async with self._refresh_lock:
            log.info("docs_refresh_started", repo_url=self._repo_url, branch=self._branch)
            try:
                state, sync = await asyncio.to_thread(self._build_state)
            except GitError as e:
                self._last_sync_error = str(e)
                log.error("docs_refresh_failed", error=str(e))
                raise SyncError(self._repo_url, self._branch, str(e)) from e

            self._state = state
            self._last_sync_error = None

        log.info(
            "docs_refresh_complete",
            commit=state.commit,
            changed=sync.changed,
            pages=len(state.pages),
            warnings=len(state.discovery_warnings),
        )
        return RefreshResult(
            force_rebuild=force_rebuild,
            commit=state.commit,
            last_sync_at=state.last_sync_at,
            pages=len(state.pages),
            changed=sync.changed,
        )

    def _build_state(self) -> tuple[IndexState, SyncResult]:
        """Blocking build of a fresh snapshot. Runs in a worker thread."""
        sync = self._syncer.sync()

        docs_dir = self._docs_dir
        warnings: list[str] = []
        if not docs_dir.is_dir():
            warnings.append(f"Docs directory not found: {docs_dir}")

        pages: list[PageRecord] = []
        for file_path in discover_markdown_files(docs_dir, warnings):
            try:
                pages.append(parse_page(file_path, docs_dir, warnings))
            except ReadError as e:
                log.warning("page_parse_failed", path=str(file_path), error=e.message)
                warnings.append(f"Skipped unreadable page {file_path}: {e.message}")

        if not pages:
            warnings.append(f"No markdown pages found under: {docs_dir}")

        state = IndexState(
            pages=tuple(pages),
            commit=sync.commit,
            last_sync_at=_utc_now_iso(),
            docs_dir_resolved=docs_dir,
            discovery_warnings=tuple(warnings),
        )
        return state, sync

    # =========================================================================
    # Queries
    # =========================================================================

    def make_list_query(
        self,
        query: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> ListQuery:
        """Validate list arguments, applying the configured default page size.

        Raises:
            InvalidArgumentError: Non-integer or out-of-range limit/offset.
        """
        try:
            return ListQuery(
                query=query,
                limit=self._top_k if limit is None else limit,
                offset=0 if offset is None else offset,
            )
        except ValidationError as e:
            err = e.errors()[0]
            field_name = ".".join(str(loc) for loc in err["loc"]) or "arguments"
            raise InvalidArgumentError(field_name, err["msg"], err.get("input")) from e

    def list_pages(
        self,
        query: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> ListResult:
        """Filter, paginate and group the current pages.

        Raises:
            InvalidArgumentError: See make_list_query.
        """
        return self.run_query(self.make_list_query(query, limit, offset))

    def run_query(self, params: ListQuery) -> ListResult:
        """Execute a validated list query against the current snapshot."""
        pages = self._state.pages
        needle = params.needle
        filtered = [p for p in pages if needle is None or p.matches(needle)]

        window = filtered[params.offset : params.offset + params.limit]
        return ListResult(
            query=params.query,
            total=len(filtered),
            offset=params.offset,
            limit=params.limit,
            results=[p.summary() for p in window],
            groups=group_pages(filtered),
        )

    def read_page(self, uri: str) -> ReadResult:
        """Read a page's current content from disk.

        Raises:
            InvalidUriError: Wrong scheme/prefix.
            PathTraversalError: URI escapes the docs root.
            NotFoundError: No such file (including pages deleted since refresh).
            ReadError: The file exists but cannot be read.
        """
        path = decode_uri(uri, self._state.docs_dir_resolved)
        return ReadResult(uri=uri, content=self._read_text(uri, path))

    def read_resource(self, path: str) -> str:
        """Body of the ``feathers-doc://docs/{path}`` resource template."""
        uri = resource_path_to_uri(path)
        return self._read_text(uri, decode_uri(uri, self._state.docs_dir_resolved))

    def _read_text(self, uri: str, path: Path) -> str:
        if not path.is_file():
            raise NotFoundError(uri, str(path))
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError as e:
            raise NotFoundError(uri, str(path)) from e
        except OSError as e:
            raise ReadError(str(path), e.strerror or str(e)) from e

    def status(self) -> StatusResult:
        """Health report. Never raises."""
        state = self._state
        return StatusResult(
            repo_url=self._repo_url,
            branch=self._branch,
            commit=state.commit,
            last_sync_at=state.last_sync_at,
            pages=len(state.pages),
            docs_dir_resolved=str(state.docs_dir_resolved),
            docs_dir_exists=state.docs_dir_resolved.exists(),
            discovery_warnings=list(state.discovery_warnings),
            cache_dir=str(self._cache_dir),
            last_sync_error=self._last_sync_error,
        )
