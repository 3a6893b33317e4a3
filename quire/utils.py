"""Utility functions for Quire.

This module contains small helpers shared across the Quire codebase:
string processing, content path handling and output directory management.

Key functions:
    slugify: Convert a name to a URL slug.
    entry_id_from_path: Derive a blog entry id from its content path.
    is_content_file: Check if a path is a Markdown or MDX document.
    is_internal_path: Check if a path is hidden from the content loader.
    ensure_clean_dir: Ensure a directory exists and is empty.
    post_url, category_url, tag_url: Page URLs for the generated views.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path
from urllib.parse import quote

CONTENT_SUFFIXES = (".md", ".mdx")


def slugify(name: str) -> str:
    """Convert a name to a lowercase, hyphen-separated slug.

    Args:
        name: Arbitrary text such as a title or filename stem.

    Returns:
        URL-friendly slug, or "index" when nothing usable remains.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", name)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def entry_id_from_path(path: Path, content_dir: Path) -> str:
    """Derive a stable entry id from a content file's location.

    The id is the path relative to the content directory, without its
    extension, with every segment slugified.

    Args:
        path: Path to the content file.
        content_dir: Root of the content collection.

    Returns:
        Entry id such as "2025/hello-world".

    Examples:
        >>> entry_id_from_path(Path("blog/2025/Hello World.md"), Path("blog"))
        '2025/hello-world'
    """
    rel = path.relative_to(content_dir).with_suffix("")
    return "/".join(slugify(part) for part in rel.parts)


def is_content_file(path: Path) -> bool:
    """Check if a path is a Markdown or MDX document.

    Args:
        path: Path to check.

    Returns:
        True if the file has a .md or .mdx extension (case-insensitive).
    """
    return path.suffix.lower() in CONTENT_SUFFIXES


def is_internal_path(path: Path) -> bool:
    """Check if a path is internal (contains components starting with _).

    Internal files and folders are skipped when loading a collection.

    Args:
        path: Path to check, relative to the content directory.

    Returns:
        True if any path component starts with underscore.
    """
    return any(part.startswith("_") for part in path.parts)


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(str(path), ignore_errors=True)
        if path.exists():
            # Fallback for stubborn directories
            for item in path.rglob("*"):
                if item.is_file():
                    item.unlink()
            for item in sorted(
                [p for p in path.rglob("*") if p.is_dir()], reverse=True
            ):
                item.rmdir()
            path.rmdir()
    path.mkdir(parents=True, exist_ok=True)


def post_url(entry_id: str) -> str:
    """URL path of a post page."""
    return f"/blog/{entry_id}/"


def category_url(slug: str) -> str:
    """URL path of a category page."""
    return f"/category/{slug}/"


def tag_url(tag: str) -> str:
    """URL path of a tag page, with the tag percent-encoded.

    Examples:
        >>> tag_url("c++ tips")
        '/tags/c%2B%2B%20tips/'
    """
    return f"/tags/{quote(tag, safe='')}/"
