"""MCP tool handlers."""

from feathers_docs.mcp.tools import docs

__all__ = ["docs"]
