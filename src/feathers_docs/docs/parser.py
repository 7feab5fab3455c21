"""Markdown page parsing: front matter, headings, title and checksum."""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
import yaml

from feathers_docs.docs.discovery import MARKDOWN_SUFFIX
from feathers_docs.docs.models import PageRecord
from feathers_docs.docs.uri import encode_uri
from feathers_docs.mcp.errors import ReadError

log = structlog.get_logger(__name__)

_FRONT_MATTER_OPEN = re.compile(r"\A---[ \t]*\r?\n")
_FRONT_MATTER_CLOSE = re.compile(r"^(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)", re.MULTILINE)
_HEADING = re.compile(r"^(#{1,6})\s+(.*)$")


@dataclass(frozen=True, slots=True)
class FrontMatter:
    """Parsed metadata block at the top of a page."""

    data: dict[str, Any]

    @property
    def title(self) -> str | None:
        value = self.data.get("title")
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None


def split_front_matter(text: str) -> tuple[FrontMatter | None, str, str | None]:
    """Separate an optional ``---`` delimited YAML block from the body.

    Returns ``(front_matter, body, problem)``. Malformed blocks degrade to
    ``front_matter=None`` with ``problem`` describing why; the page itself is
    never rejected.
    """
    opening = _FRONT_MATTER_OPEN.match(text)
    if opening is None:
        return None, text, None

    closing = _FRONT_MATTER_CLOSE.search(text, opening.end())
    if closing is None:
        return None, text, "unterminated front matter block"

    raw = text[opening.end() : closing.start()]
    body = text[closing.end() :]
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        return None, body, f"invalid front matter YAML: {e}"

    if data is None:
        return FrontMatter(data={}), body, None
    if not isinstance(data, dict):
        return None, body, f"front matter is a {type(data).__name__}, expected a mapping"
    return FrontMatter(data=data), body, None


def extract_headings(body: str) -> list[str]:
    """Text of every ``#`` .. ``######`` heading line, in document order.

    A heading with no text yields ``""`` so positions stay one per line.
    """
    headings: list[str] = []
    for line in body.splitlines():
        match = _HEADING.match(line)
        if match is None:
            continue
        headings.append(match.group(2).strip())
    return headings


def parse_page(file_path: Path, docs_root: Path, warnings: list[str] | None = None) -> PageRecord:
    """Parse one markdown file into a PageRecord.

    Args:
        file_path: Markdown file under ``docs_root``.
        docs_root: Root the relative path and URI are computed against.
        warnings: Optional sink for non-fatal front matter problems.

    Raises:
        ReadError: The file vanished or could not be read.
    """
    try:
        raw = file_path.read_bytes()
        stat = file_path.stat()
    except OSError as e:
        raise ReadError(str(file_path), e.strerror or str(e)) from e

    relative_path = file_path.relative_to(docs_root).as_posix()
    text = raw.decode("utf-8", errors="replace").removeprefix("\ufeff")

    front_matter, body, problem = split_front_matter(text)
    if problem is not None:
        log.warning("front_matter_ignored", path=relative_path, reason=problem)
        if warnings is not None:
            warnings.append(f"Ignored front matter in {relative_path}: {problem}")

    headings = extract_headings(body)
    title = (
        (front_matter.title if front_matter else None)
        or next((h for h in headings if h), None)
        or file_path.name.removesuffix(MARKDOWN_SUFFIX)
        or file_path.name
    )

    return PageRecord(
        uri=encode_uri(relative_path),
        title=title,
        relative_path=relative_path,
        headings=tuple(headings),
        checksum=hashlib.sha256(raw).hexdigest(),
        last_modified=stat.st_mtime_ns // 1_000_000,
    )
