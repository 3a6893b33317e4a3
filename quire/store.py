"""Content store for Quire.

The store is the snapshot every query reads from: validated blog entries and
the configured categories, loaded once per build and never mutated. Tests
build a ContentStore directly from fixtures; real builds go through
load_store, which reads the content directory and quire.yaml.

Key classes:
- BlogEntry: A validated post together with its id, body and source file.
- ContentStore: Immutable snapshot of both collections.
- FileContentLoader: Discovers and parses post files in a content directory.
- ContentError: Every problem found while loading, raised as one error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import config_path, load_config
from .frontmatter import FrontmatterError, read_document
from .schema import (
    BLOG,
    CATEGORY,
    Category,
    Post,
    Reference,
    ValidationError,
    ValidationIssue,
    validate_category,
    validate_post,
)
from .utils import entry_id_from_path, is_content_file, is_internal_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlogEntry:
    """A blog post as held by the store.

    Attributes:
        id: Path-derived identifier, unique within the collection.
        data: Validated frontmatter.
        body: Markdown/MDX source after the frontmatter block.
        path: Source file, if the entry was loaded from disk.
        frontmatter: Raw frontmatter mapping, including unknown keys.
    """

    id: str
    data: Post
    body: str = ""
    path: Path | None = None
    frontmatter: Mapping[str, Any] = field(
        default_factory=dict, compare=False, hash=False, repr=False
    )

    collection = BLOG


class ContentError(Exception):
    """One or more content entries failed to load.

    Attributes:
        errors: FrontmatterError and ValidationError instances, each with a
            ``source_path`` and ``message``.
    """

    def __init__(self, errors: Iterable[Exception]):
        self.errors = list(errors)
        count = len(self.errors)
        noun = "entry" if count == 1 else "entries"
        lines = [f"{count} invalid content {noun}:"]
        lines.extend(f"  {error}" for error in self.errors)
        super().__init__("\n".join(lines))


@dataclass(frozen=True)
class ContentStore:
    """Immutable snapshot of the blog and category collections.

    Attributes:
        posts: Blog entries in load order.
        categories: Categories in configuration order.
    """

    posts: tuple[BlogEntry, ...] = ()
    categories: tuple[Category, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "posts", tuple(self.posts))
        object.__setattr__(self, "categories", tuple(self.categories))

    def get_collection(self, name: str) -> tuple:
        """Return every entry of a collection ("blog" or "category")."""
        if name == BLOG:
            return self.posts
        if name == CATEGORY:
            return self.categories
        raise KeyError(f"Unknown collection: {name}")

    def get_entry(self, reference: Reference) -> BlogEntry | Category | None:
        """Resolve a reference, returning None when nothing matches."""
        for entry in self.get_collection(reference.collection):
            if entry.id == reference.id:
                return entry
        return None

    def unresolved_posts(self) -> tuple[BlogEntry, ...]:
        """Posts whose category reference matches no known category."""
        known = {category.id for category in self.categories}
        return tuple(p for p in self.posts if p.data.category.id not in known)


class FileContentLoader:
    """Loads blog entries from a content directory.

    Every ``.md`` and ``.mdx`` file below the directory is a post, except
    files or folders whose name starts with an underscore.

    Attributes:
        content_dir: Root of the blog collection.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def iter_files(self) -> list[Path]:
        """List content files in a stable (sorted) order."""
        if not self.content_dir.is_dir():
            logger.warning("Content directory %s does not exist", self.content_dir)
            return []
        files: list[Path] = []
        for path in sorted(self.content_dir.rglob("*")):
            if path.is_dir():
                continue
            if is_internal_path(path.relative_to(self.content_dir)):
                continue
            if is_content_file(path):
                files.append(path)
        return files

    def load_entry(self, path: Path) -> BlogEntry:
        """Parse and validate one post file.

        Raises:
            FrontmatterError: If the file cannot be decoded or its frontmatter
                block cannot be parsed.
            ValidationError: If the frontmatter does not match the schema.
        """
        frontmatter, body = read_document(path)
        post = validate_post(frontmatter, path, base_dir=path.parent).unwrap()
        return BlogEntry(
            id=entry_id_from_path(path, self.content_dir),
            data=post,
            body=body,
            path=path,
            frontmatter=frontmatter,
        )

    def load(self) -> tuple[list[BlogEntry], list[Exception]]:
        """Load every post, collecting failures instead of stopping at the first.

        Returns:
            Tuple of (valid entries, errors).
        """
        entries: list[BlogEntry] = []
        errors: list[Exception] = []
        seen: dict[str, Path] = {}
        for path in self.iter_files():
            try:
                entry = self.load_entry(path)
            except (FrontmatterError, ValidationError) as exc:
                errors.append(exc)
                continue
            if entry.id in seen:
                issue = ValidationIssue(
                    "id", f"duplicate entry id {entry.id!r} (also {seen[entry.id]})"
                )
                errors.append(ValidationError(path, BLOG, [issue]))
                continue
            seen[entry.id] = path
            entries.append(entry)
        logger.debug("Loaded %d posts from %s", len(entries), self.content_dir)
        return entries, errors


def load_categories(
    raw_categories: Iterable[Any], source: Path | str = "categories"
) -> tuple[list[Category], list[Exception]]:
    """Validate the configured category list.

    Args:
        raw_categories: Category mappings from configuration.
        source: Where the list came from, used in error locations.

    Returns:
        Tuple of (valid categories, errors). Duplicate ids or slugs are errors.
    """
    categories: list[Category] = []
    errors: list[Exception] = []
    ids: set[str] = set()
    slugs: set[str] = set()
    for index, raw in enumerate(raw_categories):
        location = f"{source}:categories[{index}]"
        result = validate_category(raw, location)
        if not result.ok:
            errors.append(result.error())
            continue
        category = result.value
        issues = []
        if category.id in ids:
            issues.append(ValidationIssue("id", f"duplicate category id {category.id!r}"))
        if category.slug in slugs:
            issues.append(
                ValidationIssue("slug", f"duplicate category slug {category.slug!r}")
            )
        if issues:
            errors.append(ValidationError(location, CATEGORY, issues))
            continue
        ids.add(category.id)
        slugs.add(category.slug)
        categories.append(category)
    return categories, errors


def load_store(project_root: Path, config: dict[str, Any] | None = None) -> ContentStore:
    """Load the content snapshot for one build.

    Args:
        project_root: Root directory of the project.
        config: Already-loaded configuration; read from quire.yaml when None.

    Returns:
        A complete ContentStore.

    Raises:
        ContentError: If any post or category is invalid, or, with
            ``strict_references`` enabled, a post references an unknown
            category.
    """
    if config is None:
        config = load_config(project_root)
    categories, errors = load_categories(
        config.get("categories", []), config_path(project_root).name
    )
    loader = FileContentLoader(project_root / config.get("content_dir", "content/blog"))
    posts, post_errors = loader.load()
    errors.extend(post_errors)

    store = ContentStore(posts=posts, categories=categories)
    for entry in store.unresolved_posts():
        if config.get("strict_references"):
            issue = ValidationIssue(
                "category", f"unknown category {entry.data.category.id!r}"
            )
            errors.append(ValidationError(entry.path or entry.id, BLOG, [issue]))
        else:
            logger.info(
                "Post %s references unknown category %r",
                entry.id,
                entry.data.category.id,
            )
    if errors:
        raise ContentError(errors)
    return store
