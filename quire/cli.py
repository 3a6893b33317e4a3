"""Command-line interface for Quire.

This module defines the CLI commands using Click framework.

Commands:
- check: Validate all content and report unresolved category references.
- posts: List published posts, newest first.
- categories: List categories with their post counts.
- tags: List tags with their post counts.
- build: Write the content views and feeds into the output directory.
- new: Create a new post interactively.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path

import click
import questionary

from . import __version__


@click.group()
@click.version_option(version=__version__, prog_name="quire")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Quire blog content tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
def check():
    """Validate all content."""
    project_root = Path.cwd()
    store = _load_store_or_exit(project_root)
    from .collections import PostCollection

    posts = PostCollection(store.posts)
    click.echo(
        f"{len(posts)} posts ({len(posts.published())} published, "
        f"{len(posts.drafts())} drafts), {len(store.categories)} categories"
    )
    for entry in store.unresolved_posts():
        click.echo(
            click.style(
                f"Warning: {entry.id} references unknown category "
                f"'{entry.data.category.id}'",
                fg="yellow",
            ),
            err=True,
        )


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft posts")
def posts(drafts: bool):
    """List published posts, newest first."""
    project_root = Path.cwd()
    store = _load_store_or_exit(project_root)
    from .collections import PostCollection
    from .queries import get_published_blogs

    if drafts:
        entries = PostCollection(store.posts).sorted()
    else:
        entries = get_published_blogs(store)
    for entry in entries:
        post = entry.data
        line = f"{post.publish_date:%Y-%m-%d}  {post.category.id:<10}  {post.title}"
        if post.is_draft:
            line += click.style(" [draft]", fg="yellow")
        click.echo(line)


@cli.command()
def categories():
    """List categories with their published post counts."""
    project_root = Path.cwd()
    store = _load_store_or_exit(project_root)
    from .queries import get_categories_with_blogs

    for group in get_categories_with_blogs(store):
        click.echo(f"{group.category.name} ({group.category.slug}): {len(group.posts)}")


@cli.command()
def tags():
    """List tags with their published post counts."""
    project_root = Path.cwd()
    store = _load_store_or_exit(project_root)
    from .queries import get_tags_with_blogs

    for group in get_tags_with_blogs(store):
        click.echo(f"{group.tag}: {len(group.posts)}")


@cli.command()
@click.option(
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    required=False,
    help="Output directory (overrides quire.yaml output_dir)",
)
def build(output_dir: Path | None):
    """Write the content views and feeds into the output directory."""
    project_root = Path.cwd()
    from .build import build_site
    from .config import ConfigError
    from .store import ContentError

    try:
        result = build_site(project_root, output_dir_override=output_dir)
    except (ConfigError, ContentError) as exc:
        _report_failure(exc, project_root)
        raise SystemExit(1) from None
    click.echo(
        f"Built {len(result.views.posts)} posts, {len(result.views.categories)} "
        f"categories and {len(result.views.tags)} tags into {result.output_dir}"
    )


@cli.command()
def new():
    """Create a new post interactively."""
    project_root = Path.cwd()
    from .config import ConfigError, load_config
    from .frontmatter import dump_frontmatter

    try:
        config = load_config(project_root)
    except ConfigError as exc:
        raise click.ClickException(exc.message) from None
    choices = [
        questionary.Choice(title=str(c.get("name", c.get("id"))), value=c.get("id"))
        for c in config["categories"]
        if isinstance(c, dict) and c.get("id")
    ]
    if not choices:
        raise click.ClickException("No categories configured in quire.yaml.")

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    category = questionary.select(
        "Category:",
        choices=choices,
        style=_questionary_style(),
    ).ask()
    if category is None:
        raise click.Abort()

    description = questionary.text("Description:", style=_questionary_style()).ask()
    if description is None:
        raise click.Abort()

    raw_tags = questionary.text(
        "Tags (comma separated):", style=_questionary_style()
    ).ask()
    if raw_tags is None:
        raise click.Abort()

    is_draft = questionary.confirm(
        "Start as a draft?", default=True, style=_questionary_style()
    ).ask()
    if is_draft is None:
        raise click.Abort()

    content_dir = project_root / config["content_dir"]
    target_path = _new_post_path(content_dir, title)
    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {target_path.relative_to(project_root)}"
        )

    frontmatter = {
        "title": title,
        "description": description.strip(),
        "publishDate": date.today(),
        "isDraft": is_draft,
        "category": category,
        "tags": _parse_tags(raw_tags),
    }
    content_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(dump_frontmatter(frontmatter), encoding="utf-8")
    click.echo(f"Created {target_path.relative_to(project_root)}")


def _new_post_path(content_dir: Path, title: str) -> Path:
    """Pick the file for a new post.

    Titles without any ASCII letter or digit have no usable slug, so they get
    a dated name, numbered when that name is already taken.
    """
    from .utils import slugify

    if re.search(r"[A-Za-z0-9]", title):
        return content_dir / f"{slugify(title)}.md"
    stem = f"{date.today().isoformat()}-post"
    candidate = content_dir / f"{stem}.md"
    counter = 2
    while candidate.exists():
        candidate = content_dir / f"{stem}-{counter}.md"
        counter += 1
    return candidate


def _parse_tags(raw: str) -> list[str]:
    """Split a comma-separated answer into tags, keeping their spelling."""
    tags: list[str] = []
    for part in raw.split(","):
        tag = part.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _load_store_or_exit(project_root: Path):
    from .config import ConfigError
    from .store import ContentError, load_store

    try:
        return load_store(project_root)
    except (ConfigError, ContentError) as exc:
        _report_failure(exc, project_root)
        raise SystemExit(1) from None


def _report_failure(exc: Exception, project_root: Path) -> None:
    """Display a user-friendly description of a failed load."""
    click.echo(click.style("Content check failed:", fg="red", bold=True), err=True)
    for error in getattr(exc, "errors", [exc]):
        click.echo(
            click.style(f"  File: {_display_path(error.source_path, project_root)}", fg="yellow"),
            err=True,
        )
        click.echo(click.style(f"  Error: {error.message}", fg="white"), err=True)


def _display_path(source: Path | str, project_root: Path) -> str:
    if isinstance(source, Path):
        try:
            return str(source.relative_to(project_root))
        except ValueError:
            return str(source)
    return source


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
