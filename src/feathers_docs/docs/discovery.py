"""Markdown file discovery under the docs root."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

log = structlog.get_logger(__name__)

MARKDOWN_SUFFIX = ".md"


def discover_markdown_files(docs_root: Path, warnings: list[str] | None = None) -> list[Path]:
    """Recursively collect ``*.md`` files under ``docs_root``.

    A missing root yields an empty list; callers report it as a warning.
    The suffix match is case-sensitive. Results are sorted by full path
    string so rebuilds over the same tree produce the same page order.
    Directories that cannot be listed are skipped and reported to
    ``warnings``.
    """
    if not docs_root.is_dir():
        return []

    def on_error(error: OSError) -> None:
        log.warning("docs_dir_unreadable", path=error.filename, error=error.strerror)
        if warnings is not None:
            warnings.append(f"Skipped unreadable directory {error.filename}: {error.strerror}")

    files: list[Path] = []
    for dirpath, _dirnames, filenames in os.walk(docs_root, onerror=on_error):
        base = Path(dirpath)
        for name in filenames:
            if not name.endswith(MARKDOWN_SUFFIX):
                continue
            candidate = base / name
            # Regular files only; symlinked pages are not indexed
            if candidate.is_file() and not candidate.is_symlink():
                files.append(candidate)

    return sorted(files, key=str)
