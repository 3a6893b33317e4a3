"""Aggregation queries over a content snapshot.

These are the views page templates consume. Each function is pure: it reads
the ContentStore it is given and re-derives its result on every call.

Functions:
    get_published_blogs: Non-draft posts, newest first.
    get_categories_with_blogs: Published posts grouped per category.
    get_tags_with_blogs: Published posts grouped per tag.
    compute_views: All three views at once.
"""

from __future__ import annotations

from dataclasses import dataclass

from .collections import PostCollection
from .schema import BLOG, CATEGORY, Category
from .store import BlogEntry, ContentStore


@dataclass(frozen=True)
class CategoryGroup:
    """A category and its published posts, newest first."""

    category: Category
    posts: PostCollection


@dataclass(frozen=True)
class TagGroup:
    """A tag and its published posts, newest first."""

    tag: str
    posts: PostCollection


@dataclass(frozen=True)
class ContentViews:
    """The three views computed from one snapshot."""

    posts: PostCollection
    categories: list[CategoryGroup]
    tags: list[TagGroup]


def get_published_blogs(store: ContentStore) -> PostCollection:
    """Return every non-draft post sorted by publish date, newest first.

    Posts sharing a publish date keep their order in the store.
    """
    return PostCollection(store.get_collection(BLOG)).published().sorted()


def get_categories_with_blogs(store: ContentStore) -> list[CategoryGroup]:
    """Group published posts by category.

    Returns one group per category in store order, including categories with
    no posts. Posts whose category is unknown appear in no group.
    """
    blogs = get_published_blogs(store)
    return [
        CategoryGroup(category=category, posts=blogs.in_category(category.id))
        for category in store.get_collection(CATEGORY)
    ]


def get_tags_with_blogs(store: ContentStore) -> list[TagGroup]:
    """Group published posts by tag.

    Tags are matched as exact strings. Groups are ordered by the first
    appearance of each tag in the newest-first published list.
    """
    blogs = get_published_blogs(store)
    buckets: dict[str, list[BlogEntry]] = {}
    for blog in blogs:
        for tag in blog.data.tags:
            buckets.setdefault(tag, []).append(blog)
    return [TagGroup(tag=tag, posts=PostCollection(posts)) for tag, posts in buckets.items()]


def compute_views(store: ContentStore) -> ContentViews:
    return ContentViews(
        posts=get_published_blogs(store),
        categories=get_categories_with_blogs(store),
        tags=get_tags_with_blogs(store),
    )
