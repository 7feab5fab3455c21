"""Docs catalog: discovery, parsing, URIs and the in-memory index."""

from feathers_docs.docs.index import DocsIndex, group_pages
from feathers_docs.docs.models import (
    IndexState,
    ListQuery,
    ListResult,
    PageGroup,
    PageRecord,
    PageSummary,
    ReadResult,
    RefreshResult,
    StatusResult,
)
from feathers_docs.docs.uri import decode_uri, encode_uri

__all__ = [
    "DocsIndex",
    "group_pages",
    "decode_uri",
    "encode_uri",
    # Models
    "IndexState",
    "ListQuery",
    "ListResult",
    "PageGroup",
    "PageRecord",
    "PageSummary",
    "ReadResult",
    "RefreshResult",
    "StatusResult",
]
