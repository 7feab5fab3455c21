"""Shared fixtures for MCP tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from fastmcp import FastMCP

from feathers_docs.config.models import DocsServerConfig
from feathers_docs.mcp.context import AppContext
from feathers_docs.mcp.registry import ToolRegistry
from feathers_docs.mcp.server import create_mcp_server


@pytest.fixture
def clean_registry() -> ToolRegistry:
    """A registry with no tools, separate from the global one."""
    return ToolRegistry()


@pytest.fixture
def app_context(config: DocsServerConfig, fake_sync: Any) -> AppContext:
    return AppContext.create(config, repo_sync=fake_sync)


@pytest_asyncio.fixture
async def refreshed_context(
    app_context: AppContext, write_page: Callable[[str, str], Path]
) -> AppContext:
    """Context whose index covers a small docs tree."""
    write_page("index.md", "# Welcome\n")
    write_page("api/index.md", '---\ntitle: "API"\n---\n## Overview\n')
    write_page("api/hooks.md", "# Hooks\n## before\n")
    await app_context.docs_index.refresh()
    return app_context


@pytest.fixture
def mcp_server(refreshed_context: AppContext) -> FastMCP:
    return create_mcp_server(refreshed_context)
