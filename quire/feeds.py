"""Feed generation for Quire.

This module generates sitemap.xml and rss.xml from the computed content
views. Generators share a small abstract base so a build can run any set of
them through a FeedRegistry.

Classes:
    FeedGenerator: Abstract base for feed generators.
    SitemapGenerator: Generates sitemap.xml.
    RSSGenerator: Generates an RSS 2.0 feed of published posts.
    FeedRegistry: Registry for managing feed generators.

Functions:
    create_default_feed_registry: Create a registry with default generators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from markupsafe import escape

from .utils import category_url, post_url, tag_url

if TYPE_CHECKING:
    from .queries import ContentViews

RFC822_FORMAT = "%a, %d %b %Y %H:%M:%S +0000"


def _base_url(site: Mapping[str, Any]) -> str:
    return str(site.get("url") or "").rstrip("/")


class FeedGenerator(ABC):
    """Abstract base class for feed generators."""

    @property
    @abstractmethod
    def filename(self) -> str:
        """Return the output filename for this feed."""
        ...

    @abstractmethod
    def generate(self, views: ContentViews, site: Mapping[str, Any]) -> str | None:
        """Generate feed content from the content views.

        Args:
            views: Published posts, category groups and tag groups.
            site: Site configuration (``url``, ``title``, ``description``).

        Returns:
            Feed content as a string, or None if the feed cannot be generated
            (e.g. no site URL configured).
        """
        ...

    def write(
        self, output_dir: Path, views: ContentViews, site: Mapping[str, Any]
    ) -> bool:
        """Generate and write the feed to the output directory.

        Returns:
            True if the feed was written, False if skipped.
        """
        content = self.generate(views, site)
        if content is None:
            return False
        (output_dir / self.filename).write_text(content, encoding="utf-8")
        return True


class SitemapGenerator(FeedGenerator):
    """Generates sitemap.xml for search engine indexing.

    Lists the home page, the blog index, every published post and every
    category and tag page. Requires ``url`` in the site configuration.
    """

    @property
    def filename(self) -> str:
        return "sitemap.xml"

    def generate(self, views: ContentViews, site: Mapping[str, Any]) -> str | None:
        base_url = _base_url(site)
        if not base_url:
            return None

        newest = views.posts[0].data.publish_date if views.posts else None
        urls: list[tuple[str, datetime | None]] = [("/", newest), ("/blog/", newest)]
        for entry in views.posts:
            urls.append((post_url(entry.id), entry.data.updated_date or entry.data.publish_date))
        for group in views.categories:
            lastmod = group.posts[0].data.publish_date if group.posts else None
            urls.append((category_url(group.category.slug), lastmod))
        for group in views.tags:
            urls.append((tag_url(group.tag), group.posts[0].data.publish_date))

        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
        ]
        for path, lastmod in urls:
            loc = escape(f"{base_url}{path}")
            if lastmod is None:
                lines.append(f"  <url><loc>{loc}</loc></url>")
            else:
                lines.append(
                    f"  <url><loc>{loc}</loc><lastmod>{lastmod.strftime('%Y-%m-%d')}</lastmod></url>"
                )
        lines.append("</urlset>")
        return "\n".join(lines)


class RSSGenerator(FeedGenerator):
    """Generates an RSS 2.0 feed of published posts, newest first.

    Requires ``url`` in the site configuration. Uses ``title`` and
    ``description`` for the channel.
    """

    @property
    def filename(self) -> str:
        return "rss.xml"

    def generate(self, views: ContentViews, site: Mapping[str, Any]) -> str | None:
        base_url = _base_url(site)
        if not base_url:
            return None
        categories = {group.category.id: group.category for group in views.categories}

        items = []
        for entry in views.posts:
            post = entry.data
            link = escape(f"{base_url}{post_url(entry.id)}")
            parts = [
                f"<title>{escape(post.title)}</title>",
                f"<link>{link}</link>",
                f'<guid isPermaLink="true">{link}</guid>',
                f"<description>{escape(post.description or post.title)}</description>",
                f"<pubDate>{post.publish_date.strftime(RFC822_FORMAT)}</pubDate>",
            ]
            category = categories.get(post.category.id)
            if category is not None:
                parts.append(f"<category>{escape(category.name)}</category>")
            items.append("<item>" + "".join(parts) + "</item>")

        build_date = datetime.now(timezone.utc).strftime(RFC822_FORMAT)
        rss = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0"><channel>',
            f"<title>{escape(site.get('title') or 'Quire Feed')}</title>",
            f"<link>{escape(base_url)}</link>",
            f"<description>{escape(site.get('description') or '')}</description>",
            f"<lastBuildDate>{build_date}</lastBuildDate>",
        ]
        rss.extend(items)
        rss.append("</channel></rss>")
        return "\n".join(rss)


class FeedRegistry:
    """Registry for managing feed generators."""

    def __init__(self) -> None:
        self._generators: list[FeedGenerator] = []

    def register(self, generator: FeedGenerator) -> None:
        self._generators.append(generator)

    def generate_all(
        self, output_dir: Path, views: ContentViews, site: Mapping[str, Any]
    ) -> list[str]:
        """Generate all registered feeds.

        Returns:
            List of filenames that were generated.
        """
        generated = []
        for generator in self._generators:
            if generator.write(output_dir, views, site):
                generated.append(generator.filename)
        return generated


def create_default_feed_registry() -> FeedRegistry:
    """Create a registry with the sitemap and RSS generators."""
    registry = FeedRegistry()
    registry.register(SitemapGenerator())
    registry.register(RSSGenerator())
    return registry
