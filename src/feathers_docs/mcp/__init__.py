"""MCP server module - FastMCP tool registration and wiring.

Import ``feathers_docs.mcp.server`` / ``feathers_docs.mcp.context`` directly;
this package stays import-light because the docs layer depends on
``feathers_docs.mcp.errors``.
"""
