"""Frontmatter parsing for Quire.

Splits a Markdown/MDX document into its YAML frontmatter block (between
``---`` markers) and the remaining body. Unlike a lenient page builder, a
blog collection cannot fall back to "no metadata": malformed YAML is raised
as a FrontmatterError carrying the source path.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)


class FrontmatterError(Exception):
    """Frontmatter that cannot be parsed into a mapping.

    Attributes:
        source_path: Path to the offending document.
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path | str, message: str):
        self.source_path = source_path
        self.message = message
        super().__init__(f"{source_path}: {message}")


def extract_frontmatter(
    text: str, source_path: Path | str = "<string>"
) -> tuple[dict[str, Any], str]:
    """Extract YAML frontmatter from document text.

    Args:
        text: Raw file content.
        source_path: Where the text came from, used in error messages.

    Returns:
        Tuple of (frontmatter dict, remaining body). A document without a
        frontmatter block yields an empty dict and the full text.

    Raises:
        FrontmatterError: If the block is not valid YAML or not a mapping.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1))
    except (yaml.YAMLError, ValueError) as exc:
        # Impossible timestamps such as 2025-13-45 raise ValueError from the constructor
        raise FrontmatterError(source_path, f"Invalid YAML frontmatter: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            source_path,
            f"Frontmatter must be a mapping, got {type(data).__name__}",
        )
    return data, text[match.end() :]


def read_document(path: Path) -> tuple[dict[str, Any], str]:
    """Read a content file and split it into frontmatter and body.

    Raises:
        FrontmatterError: If the file is not valid UTF-8 or its frontmatter
            cannot be parsed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FrontmatterError(path, f"File is not valid UTF-8: {exc}") from exc
    return extract_frontmatter(text, path)


def dump_frontmatter(data: dict[str, Any], body: str = "") -> str:
    """Serialize a frontmatter mapping and body back into document text."""
    block = yaml.safe_dump(data, allow_unicode=True, sort_keys=False)
    return f"---\n{block}---\n\n{body}"
