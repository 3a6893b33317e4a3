"""Build output for Quire.

This module runs one build cycle: it loads configuration and the content
snapshot, computes the views and writes them to the output directory as JSON
for page templates, followed by the sitemap and RSS feeds.

Key functions:
- build_site: Main function to build the output directory.
- post_to_dict / category_group_to_dict / tag_group_to_dict: JSON shapes of
  the views.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .config import load_config
from .feeds import FeedRegistry, create_default_feed_registry
from .queries import CategoryGroup, ContentViews, TagGroup, compute_views
from .store import BlogEntry, ContentStore, load_store
from .utils import category_url, ensure_clean_dir, post_url, tag_url

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Result of a build.

    Attributes:
        store: The content snapshot the build read.
        views: The computed views.
        output_dir: Directory the build wrote to.
        generated: Filenames written, in order.
    """

    store: ContentStore
    views: ContentViews
    output_dir: Path
    generated: list[str]


def post_to_dict(entry: BlogEntry) -> dict[str, Any]:
    post = entry.data
    return {
        "id": entry.id,
        "url": post_url(entry.id),
        "title": post.title,
        "description": post.description,
        "publishDate": post.publish_date.isoformat(),
        "updatedDate": post.updated_date.isoformat() if post.updated_date else None,
        "isDraft": post.is_draft,
        "heroImage": post.hero_image.src if post.hero_image else None,
        "category": post.category.id,
        "tags": list(post.tags),
    }


def category_group_to_dict(group: CategoryGroup) -> dict[str, Any]:
    category = group.category
    return {
        "category": {"id": category.id, "slug": category.slug, "name": category.name},
        "url": category_url(category.slug),
        "posts": group.posts.ids(),
    }


def tag_group_to_dict(group: TagGroup) -> dict[str, Any]:
    return {"tag": group.tag, "url": tag_url(group.tag), "posts": group.posts.ids()}


def build_site(
    project_root: Path,
    output_dir_override: Path | None = None,
    clean_output: bool = True,
    feeds: FeedRegistry | None = None,
) -> BuildResult:
    """Build the output directory from the project's content.

    Args:
        project_root: Root directory of the project.
        output_dir_override: Write here instead of the configured output_dir.
        clean_output: Whether to wipe the output directory first.
        feeds: Feed registry to run; defaults to sitemap and RSS.

    Returns:
        BuildResult describing what was written.

    Raises:
        ConfigError: If quire.yaml is invalid.
        ContentError: If any content entry is invalid.
    """
    config = load_config(project_root)
    store = load_store(project_root, config)
    views = compute_views(store)

    output_dir = output_dir_override or (project_root / config.get("output_dir", "output"))
    if clean_output:
        ensure_clean_dir(output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)

    generated = []
    payloads = {
        "posts.json": [post_to_dict(entry) for entry in views.posts],
        "categories.json": [category_group_to_dict(group) for group in views.categories],
        "tags.json": [tag_group_to_dict(group) for group in views.tags],
    }
    for filename, payload in payloads.items():
        _write_json(output_dir / filename, payload)
        generated.append(filename)

    registry = feeds or create_default_feed_registry()
    generated.extend(registry.generate_all(output_dir, views, config))
    logger.info("Wrote %s into %s", ", ".join(generated), output_dir)
    return BuildResult(store=store, views=views, output_dir=output_dir, generated=generated)


def _write_json(path: Path, payload: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
        f.write("\n")
