"""Quire blog content layer.

Quire loads Markdown/MDX blog posts and a configured category list, validates
them against an explicit schema and derives the views page templates are
built from: published posts, posts per category and posts per tag.

The CLI module provides commands for checking content, listing the views,
writing them to an output directory and scaffolding new posts.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
