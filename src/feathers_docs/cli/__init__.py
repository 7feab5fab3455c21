"""Command-line interface for the FeathersJS docs MCP server."""
