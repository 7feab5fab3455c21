"""Configuration constants.

Truly constant values that should NOT be user-configurable: protocol
identifiers and API stability limits.

For configurable values, see models.py.
"""

# =============================================================================
# Resource Identifiers
# =============================================================================

URI_SCHEME = "feathers-doc"
"""Scheme of every page identifier."""

URI_PREFIX = f"{URI_SCHEME}://docs/"
"""Required prefix for read_doc arguments and the resource template."""

RESOURCE_TEMPLATE = f"{URI_PREFIX}{{path*}}"
"""Templated resource URI; ``path`` may span several segments."""

MARKDOWN_MIME_TYPE = "text/markdown"

# =============================================================================
# list_docs Limits
# =============================================================================

LIST_LIMIT_MIN = 1
LIST_LIMIT_MAX = 20
"""Valid page size range for list_docs."""

RESULT_HEADINGS_MAX = 8
"""Headings kept per list_docs entry."""

ROOT_GROUP = "/"
"""Group key for pages that sit directly in the docs root."""

# =============================================================================
# Protocol/Validation Constants
# =============================================================================

SERVER_NAME = "feathersjs-docs-mcp"

PORT_MIN = 0
PORT_MAX = 65535
"""Valid port range."""
