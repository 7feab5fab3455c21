"""Docs MCP tools - list_docs, read_doc, refresh_docs_index, get_docs_status."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field

from feathers_docs.config.constants import LIST_LIMIT_MAX, LIST_LIMIT_MIN, URI_PREFIX
from feathers_docs.mcp.registry import registry
from feathers_docs.mcp.tools.base import BaseParams

if TYPE_CHECKING:
    from feathers_docs.mcp.context import AppContext


# =============================================================================
# Parameter Models
# =============================================================================


class ListDocsParams(BaseParams):
    """Parameters for list_docs."""

    query: str | None = Field(
        None,
        description="Case-insensitive substring matched against title, path and headings.",
    )
    limit: int | None = Field(
        None,
        ge=LIST_LIMIT_MIN,
        le=LIST_LIMIT_MAX,
        strict=True,
        description=f"Page size ({LIST_LIMIT_MIN}-{LIST_LIMIT_MAX}). Defaults to the configured top_k.",
    )
    offset: int | None = Field(
        None,
        ge=0,
        strict=True,
        description="Number of matching pages to skip.",
    )


class ReadDocParams(BaseParams):
    """Parameters for read_doc."""

    uri: str = Field(..., description=f"Page URI from list_docs ({URI_PREFIX}<path>).")


class RefreshDocsParams(BaseParams):
    """Parameters for refresh_docs_index."""

    force_rebuild: bool = Field(
        False,
        alias="forceRebuild",
        description="Accepted for compatibility; every refresh rebuilds the index.",
    )


class StatusParams(BaseParams):
    """Parameters for get_docs_status (none)."""


# =============================================================================
# Tool Handlers
# =============================================================================


@registry.register(
    "list_docs",
    "List FeathersJS documentation pages, optionally filtered by a query. "
    "Returns a page of results plus folder groups covering every match.",
    ListDocsParams,
)
async def list_docs(ctx: AppContext, params: ListDocsParams) -> dict[str, Any]:
    result = ctx.docs_index.list_pages(params.query, params.limit, params.offset)
    return result.to_dict()


@registry.register(
    "read_doc",
    "Read the markdown content of one documentation page by its feathers-doc:// URI.",
    ReadDocParams,
)
async def read_doc(ctx: AppContext, params: ReadDocParams) -> dict[str, Any]:
    return ctx.docs_index.read_page(params.uri).to_dict()


@registry.register(
    "refresh_docs_index",
    "Pull the latest docs from the upstream repository and rebuild the index.",
    RefreshDocsParams,
)
async def refresh_docs_index(ctx: AppContext, params: RefreshDocsParams) -> dict[str, Any]:
    result = await ctx.docs_index.refresh(force_rebuild=params.force_rebuild)
    return result.to_dict()


@registry.register(
    "get_docs_status",
    "Report repository, commit, page count and discovery warnings of the docs index.",
    StatusParams,
)
async def get_docs_status(ctx: AppContext, params: StatusParams) -> dict[str, Any]:  # noqa: ARG001
    return ctx.docs_index.status().to_dict()
