"""Configuration loading for Quire.

Site configuration lives in ``quire.yaml`` at the project root. Missing keys
fall back to DEFAULT_CONFIG, including the default category list.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "quire.yaml"

DEFAULT_CATEGORIES = [
    {"id": "tech", "slug": "tech", "name": "Tech"},
    {"id": "scratch", "slug": "scratch", "name": "Scratch"},
    {"id": "design", "slug": "design", "name": "Design"},
]

DEFAULT_CONFIG = {
    "title": "Quire Blog",
    "description": "Welcome to my website!",
    "url": "",
    "content_dir": "content/blog",
    "output_dir": "output",
    "categories": DEFAULT_CATEGORIES,
    "strict_references": False,
}


class ConfigError(Exception):
    """Error in quire.yaml.

    Attributes:
        source_path: Path to the configuration file.
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path, message: str):
        self.source_path = source_path
        self.message = message
        super().__init__(f"{source_path}: {message}")


def config_path(project_root: Path) -> Path:
    return project_root / CONFIG_FILENAME


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from quire.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If the file is not valid YAML, is not a mapping, or
            its ``categories`` value is not a list.
    """
    path = config_path(project_root)
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not path.exists():
        return config
    with open(path, encoding="utf-8") as f:
        try:
            loaded = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(path, f"Invalid YAML: {exc}") from exc
    if loaded is None:
        return config
    if not isinstance(loaded, dict):
        raise ConfigError(path, "Configuration must be a mapping")
    config.update(loaded)
    if not isinstance(config["categories"], list):
        raise ConfigError(path, "'categories' must be a list")
    return config
