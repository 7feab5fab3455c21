"""Conversion between feathers-doc URIs and files under the docs root.

``decode_uri`` is the only access-control check the server has: every
read_doc call and every templated resource fetch goes through it before any
file is opened.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import quote, unquote

from feathers_docs.config.constants import URI_PREFIX
from feathers_docs.mcp.errors import InvalidUriError, PathTraversalError


def normalize_relative_path(relative_path: str) -> str:
    """Force forward slashes regardless of host separator."""
    return relative_path.replace("\\", "/")


def encode_uri(relative_path: str) -> str:
    """Build the stable URI of a docs-relative path.

    Characters outside the unreserved set are percent-quoted (``/`` stays
    literal) so that ``decode_uri`` maps the URI back to the same file.
    """
    return URI_PREFIX + quote(normalize_relative_path(relative_path), safe="/")


def resource_path_to_uri(path: str) -> str:
    """URI for the ``{path}`` argument of the resource template."""
    return URI_PREFIX + path


def decode_uri(uri: str, docs_root: Path) -> Path:
    """Resolve a URI to an absolute path inside ``docs_root``.

    The file itself is never touched; symlinks are resolved before the
    containment check.

    Raises:
        InvalidUriError: Missing ``feathers-doc://docs/`` prefix or an
            undecodable path.
        PathTraversalError: The resolved path escapes ``docs_root``.
    """
    if not isinstance(uri, str) or not uri.startswith(URI_PREFIX):
        raise InvalidUriError(str(uri), f"expected prefix {URI_PREFIX}")

    try:
        relative = unquote(uri[len(URI_PREFIX) :], errors="strict")
    except UnicodeDecodeError as e:
        raise InvalidUriError(uri, "percent-encoding is not valid UTF-8") from e
    if "\x00" in relative:
        raise InvalidUriError(uri, "path contains a NUL byte")

    root = docs_root.resolve()
    resolved = (root / relative).resolve()
    if not resolved.is_relative_to(root):
        raise PathTraversalError(uri, str(root))
    return resolved
