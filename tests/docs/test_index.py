"""Tests for DocsIndex refresh, list, read and status."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

from feathers_docs.config.models import DocsServerConfig, LimitsConfig, RepoConfig
from feathers_docs.docs.index import DocsIndex, group_pages
from feathers_docs.docs.models import PageRecord
from feathers_docs.git.errors import BranchNotFoundError, RemoteError
from feathers_docs.mcp.errors import (
    InvalidArgumentError,
    InvalidUriError,
    MCPErrorCode,
    NotFoundError,
    PathTraversalError,
    SyncError,
)

WritePage = Callable[[str, str], Path]


def _page(relative_path: str, title: str = "T", headings: tuple[str, ...] = ()) -> PageRecord:
    return PageRecord(
        uri=f"feathers-doc://docs/{relative_path}",
        title=title,
        relative_path=relative_path,
        headings=headings,
        checksum="0" * 64,
        last_modified=0,
    )


@pytest_asyncio.fixture
async def populated(index: DocsIndex, write_page: WritePage) -> DocsIndex:
    """Index over a small docs tree, refreshed once."""
    write_page("index.md", "---\ntitle: Welcome\n---\n# Welcome\n")
    write_page("api/index.md", '---\ntitle: "API"\n---\n## Overview\n')
    write_page("api/hooks.md", "# Hooks\n## before\n## after\n## error\n")
    write_page("api/services.md", "# Services\n## find\n## get\n")
    write_page("guides/basics/setup.md", "# Setup\n## Install\n")
    write_page("guides/basics/authentication.md", "# Authentication\n## Local strategy\n")
    write_page("cookbook/express.md", "# Express\n")
    await index.refresh()
    return index


class TestGroupPages:
    """Folder grouping."""

    def test_root_pages_use_slash(self) -> None:
        groups = group_pages([_page("index.md"), _page("api/a.md")])
        assert [(g.folder, g.count) for g in groups] == [("/", 1), ("api", 1)]

    def test_sorted_folders_and_pages(self) -> None:
        groups = group_pages(
            [_page("b/z.md"), _page("a/y.md"), _page("b/a.md"), _page("a/b/c.md")]
        )
        assert [g.folder for g in groups] == ["a", "a/b", "b"]
        assert [p.relative_path for p in groups[2].pages] == ["b/a.md", "b/z.md"]

    def test_empty(self) -> None:
        assert group_pages([]) == []


class TestRefresh:
    """Refresh lifecycle."""

    @pytest.mark.asyncio
    async def test_builds_pages_and_metadata(
        self, index: DocsIndex, write_page: WritePage, fake_sync: Any
    ) -> None:
        write_page("a.md", "# A\n")

        result = await index.refresh()

        assert result.ok is True
        assert result.pages == 1
        assert result.commit == fake_sync.commit
        assert result.force_rebuild is False
        assert result.last_sync_at is not None
        assert result.last_sync_at.endswith("Z")
        assert index.state.commit == fake_sync.commit
        assert index.state.discovery_warnings == ()

    @pytest.mark.asyncio
    async def test_force_rebuild_is_echoed(self, index: DocsIndex, write_page: WritePage) -> None:
        write_page("a.md", "# A\n")

        result = await index.refresh(force_rebuild=True)

        assert result.force_rebuild is True
        assert result.to_dict()["forceRebuild"] is True

    @pytest.mark.asyncio
    async def test_idempotent_on_unchanged_upstream(
        self, index: DocsIndex, write_page: WritePage
    ) -> None:
        # Given
        write_page("api/index.md", "---\ntitle: API\n---\n## Overview\n")
        write_page("guide.md", "# Guide\n")

        # When
        first = await index.refresh()
        pages_first = [(p.title, p.headings, p.relative_path) for p in index.state.pages]
        second = await index.refresh()
        pages_second = [(p.title, p.headings, p.relative_path) for p in index.state.pages]

        # Then
        assert first.changed is True
        assert second.changed is False
        assert pages_first == pages_second

    @pytest.mark.asyncio
    async def test_sync_failure_keeps_previous_state(
        self, index: DocsIndex, write_page: WritePage, fake_sync: Any
    ) -> None:
        # Given
        write_page("a.md", "# A\n")
        await index.refresh()
        before = index.state
        fake_sync.error = RemoteError("origin", "connection refused")

        # When
        with pytest.raises(SyncError) as exc_info:
            await index.refresh()

        # Then
        assert exc_info.value.code == MCPErrorCode.SYNC_FAILED
        assert "connection refused" in exc_info.value.message
        assert index.state is before
        assert index.list_pages().total == 1
        assert index.status().last_sync_error is not None

    @pytest.mark.asyncio
    async def test_successful_refresh_clears_sync_error(
        self, index: DocsIndex, write_page: WritePage, fake_sync: Any
    ) -> None:
        write_page("a.md", "# A\n")
        fake_sync.error = BranchNotFoundError("dove")
        with pytest.raises(SyncError):
            await index.refresh()
        assert index.status().last_sync_error == "Branch not found: dove"

        fake_sync.error = None
        await index.refresh()

        assert index.status().last_sync_error is None

    @pytest.mark.asyncio
    async def test_unusable_cache_dir_is_a_sync_error(self, tmp_path: Path) -> None:
        # Given - cache root occupied by a regular file
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        index = DocsIndex(DocsServerConfig(repo=RepoConfig(cache_dir=str(blocker))))

        # When
        with pytest.raises(SyncError) as exc_info:
            await index.refresh()

        # Then
        assert exc_info.value.code == MCPErrorCode.SYNC_FAILED
        last_error = index.status().last_sync_error
        assert last_error is not None
        assert last_error.startswith("Cache directory error at ")
        assert index.state.pages == ()

    @pytest.mark.asyncio
    async def test_replaces_state_wholesale(
        self, index: DocsIndex, write_page: WritePage, docs_dir: Path
    ) -> None:
        write_page("old.md", "# Old\n")
        await index.refresh()
        old_state = index.state

        (docs_dir / "old.md").unlink()
        write_page("new.md", "# New\n")
        await index.refresh()

        assert [p.relative_path for p in old_state.pages] == ["old.md"]
        assert [p.relative_path for p in index.state.pages] == ["new.md"]

    @pytest.mark.asyncio
    async def test_concurrent_refreshes_serialize(
        self, index: DocsIndex, write_page: WritePage, fake_sync: Any
    ) -> None:
        write_page("a.md", "# A\n")

        results = await asyncio.gather(index.refresh(), index.refresh())

        assert fake_sync.calls == 2
        assert all(r.pages == 1 for r in results)
        assert len(index.state.pages) == 1

    @pytest.mark.asyncio
    async def test_malformed_front_matter_warns(
        self, index: DocsIndex, write_page: WritePage
    ) -> None:
        write_page("bad.md", "---\ntitle: [\n---\n# Still Indexed\n")

        await index.refresh()

        assert [p.title for p in index.state.pages] == ["Still Indexed"]
        assert any("bad.md" in w for w in index.state.discovery_warnings)


class TestListPages:
    """Filtering, pagination and grouping."""

    @pytest.mark.asyncio
    async def test_api_index_scenario(self, index: DocsIndex, write_page: WritePage) -> None:
        # Given
        write_page("api/index.md", '---\ntitle: "API"\n---\n## Overview\n')
        await index.refresh()

        # When
        result = index.list_pages().to_dict()

        # Then
        assert result["total"] == 1
        assert result["count"] == 1
        entry = result["results"][0]
        assert entry["title"] == "API"
        assert entry["headings"] == ["Overview"]
        assert entry["relativePath"] == "api/index.md"
        assert entry["uri"] == "feathers-doc://docs/api/index.md"
        assert result["groups"] == [{"folder": "api", "count": 1, "pages": [entry]}]

    @pytest.mark.asyncio
    async def test_defaults(self, populated: DocsIndex) -> None:
        result = populated.list_pages()

        assert result.query is None
        assert result.offset == 0
        assert result.limit == 6
        assert result.total == 7
        assert result.count == 6

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("limit", "offset"),
        [(1, 0), (3, 0), (3, 3), (3, 6), (5, 5), (20, 0), (2, 7), (4, 100)],
    )
    async def test_pagination_law(self, populated: DocsIndex, limit: int, offset: int) -> None:
        result = populated.list_pages(limit=limit, offset=offset)

        assert result.count == min(limit, max(0, result.total - offset))
        assert sum(g.count for g in result.groups) == result.total

    @pytest.mark.asyncio
    async def test_offset_past_end(self, populated: DocsIndex) -> None:
        result = populated.list_pages(offset=7)

        assert result.count == 0
        assert result.results == []
        assert sum(g.count for g in result.groups) == 7

    @pytest.mark.asyncio
    async def test_pages_cover_everything_once(self, populated: DocsIndex) -> None:
        seen: list[str] = []
        for offset in range(0, 7, 2):
            seen.extend(r.uri for r in populated.list_pages(limit=2, offset=offset).results)

        assert len(seen) == 7
        assert len(set(seen)) == 7

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("hooks", ["api/hooks.md"]),  # title and path
            ("HOOKS", ["api/hooks.md"]),  # case-insensitive
            ("local strategy", ["guides/basics/authentication.md"]),  # heading
            ("basics/", ["guides/basics/authentication.md", "guides/basics/setup.md"]),
            ("  express  ", ["cookbook/express.md"]),  # trimmed
            ("no-such-thing", []),
        ],
    )
    async def test_filter(self, populated: DocsIndex, query: str, expected: list[str]) -> None:
        result = populated.list_pages(query=query, limit=20)

        assert sorted(r.relative_path for r in result.results) == expected
        assert result.total == len(expected)
        assert result.query == query

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   ", None])
    async def test_blank_query_matches_all(self, populated: DocsIndex, query: str | None) -> None:
        assert populated.list_pages(query=query, limit=20).total == 7

    @pytest.mark.asyncio
    async def test_groups_cover_full_filtered_set(self, populated: DocsIndex) -> None:
        result = populated.list_pages(query="guides", limit=1)

        assert result.count == 1
        assert [(g.folder, g.count) for g in result.groups] == [("guides/basics", 2)]

    @pytest.mark.asyncio
    async def test_headings_capped(self, index: DocsIndex, write_page: WritePage) -> None:
        write_page("long.md", "".join(f"## H{i}\n" for i in range(12)))
        await index.refresh()

        entry = index.list_pages().results[0]

        assert len(entry.headings) == 8
        assert len(index.state.pages[0].headings) == 12

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("kwargs", "field_name"),
        [
            ({"limit": 0}, "limit"),
            ({"limit": 21}, "limit"),
            ({"limit": -1}, "limit"),
            ({"limit": 2.5}, "limit"),
            ({"limit": "5"}, "limit"),
            ({"limit": True}, "limit"),
            ({"offset": -1}, "offset"),
            ({"offset": 1.0}, "offset"),
        ],
    )
    async def test_invalid_arguments(
        self, populated: DocsIndex, kwargs: dict[str, Any], field_name: str
    ) -> None:
        before = populated.state

        with pytest.raises(InvalidArgumentError) as exc_info:
            populated.list_pages(**kwargs)

        assert exc_info.value.code == MCPErrorCode.INVALID_PARAMS
        assert exc_info.value.context["field"] == field_name
        assert populated.state is before

    @pytest.mark.asyncio
    async def test_configured_top_k(
        self, config: DocsServerConfig, fake_sync: Any, write_page: WritePage
    ) -> None:
        write_page("a.md", "# A\n")
        write_page("b.md", "# B\n")
        write_page("c.md", "# C\n")
        index = DocsIndex(config.model_copy(update={"limits": LimitsConfig(top_k=2)}), fake_sync)
        await index.refresh()

        result = index.list_pages()

        assert result.limit == 2
        assert result.count == 2
        assert result.total == 3


class TestReadPage:
    """Reading page content."""

    @pytest.mark.asyncio
    async def test_every_listed_uri_readable(self, populated: DocsIndex) -> None:
        for entry in populated.list_pages(limit=20).results:
            result = populated.read_page(entry.uri)
            assert result.uri == entry.uri
            assert result.content

    @pytest.mark.asyncio
    async def test_uris_unique_and_round_trip(self, populated: DocsIndex, docs_dir: Path) -> None:
        from feathers_docs.docs.uri import decode_uri

        uris = [p.uri for p in populated.state.pages]
        assert len(uris) == len(set(uris))
        for page in populated.state.pages:
            assert decode_uri(page.uri, docs_dir) == (docs_dir / page.relative_path).resolve()

    @pytest.mark.asyncio
    async def test_reads_fresh_content(
        self, index: DocsIndex, write_page: WritePage
    ) -> None:
        write_page("a.md", "# Before\n")
        await index.refresh()
        write_page("a.md", "# After\n")

        assert index.read_page("feathers-doc://docs/a.md").content == "# After\n"

    @pytest.mark.asyncio
    async def test_deleted_page_not_found(
        self, index: DocsIndex, write_page: WritePage
    ) -> None:
        path = write_page("a.md", "# A\n")
        await index.refresh()
        path.unlink()

        with pytest.raises(NotFoundError) as exc_info:
            index.read_page("feathers-doc://docs/a.md")

        assert exc_info.value.code == MCPErrorCode.FILE_NOT_FOUND

    @pytest.mark.asyncio
    async def test_directory_not_found(self, populated: DocsIndex) -> None:
        with pytest.raises(NotFoundError):
            populated.read_page("feathers-doc://docs/api")

    @pytest.mark.asyncio
    async def test_traversal_rejected(self, populated: DocsIndex) -> None:
        with pytest.raises(PathTraversalError):
            populated.read_page("feathers-doc://docs/../../etc/passwd")

    @pytest.mark.asyncio
    async def test_bad_scheme_rejected(self, populated: DocsIndex) -> None:
        with pytest.raises(InvalidUriError):
            populated.read_page("https://feathersjs.com/api/hooks.html")

    @pytest.mark.asyncio
    async def test_read_resource(self, populated: DocsIndex) -> None:
        assert populated.read_resource("api/hooks.md").startswith("# Hooks")

    @pytest.mark.asyncio
    async def test_read_resource_traversal(self, populated: DocsIndex) -> None:
        with pytest.raises(PathTraversalError):
            populated.read_resource("../../../etc/passwd")


class TestStatus:
    """Health reporting and degraded docs roots."""

    def test_before_first_refresh(self, index: DocsIndex, docs_dir: Path) -> None:
        status = index.status().to_dict()

        assert status["pages"] == 0
        assert status["commit"] == ""
        assert status["lastSyncAt"] is None
        assert status["docsDirResolved"] == str(docs_dir)
        assert status["repoUrl"] == "https://github.com/feathersjs/feathers.git"
        assert status["branch"] == "dove"
        assert status["lastSyncError"] is None

    @pytest.mark.asyncio
    async def test_after_refresh(self, populated: DocsIndex, fake_sync: Any, tmp_path: Path) -> None:
        status = populated.status()

        assert status.pages == 7
        assert status.commit == fake_sync.commit
        assert status.docs_dir_exists is True
        assert status.discovery_warnings == []
        assert status.cache_dir == str((tmp_path / "cache").resolve())

    @pytest.mark.asyncio
    async def test_empty_docs_root(self, index: DocsIndex, docs_dir: Path) -> None:
        # Given
        docs_dir.mkdir(parents=True)

        # When
        await index.refresh()

        # Then
        status = index.status()
        assert status.pages == 0
        assert status.docs_dir_exists is True
        assert any("No markdown pages found" in w for w in status.discovery_warnings)
        listing = index.list_pages().to_dict()
        assert listing["total"] == 0
        assert listing["results"] == []
        assert listing["groups"] == []

    @pytest.mark.asyncio
    async def test_missing_docs_root(self, index: DocsIndex) -> None:
        # Given - sync succeeds but the repository has no docs/ directory

        # When
        result = await index.refresh()

        # Then
        status = index.status()
        assert result.pages == 0
        assert status.docs_dir_exists is False
        assert any("Docs directory not found" in w for w in status.discovery_warnings)
        assert index.list_pages().total == 0
        with pytest.raises(NotFoundError):
            index.read_page("feathers-doc://docs/index.md")
