"""Read-only MCP catalog of the FeathersJS documentation."""

__version__ = "0.1.0"
