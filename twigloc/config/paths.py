from __future__ import annotations

from pathlib import Path

# Single source of truth for configuration file names.
SETTINGS_FILE = "twigloc.yaml"
SETTINGS_SECTION = "twiggy"
COMPOSER_FILE = "composer.json"


def settings_path(root: Path) -> Path:
    """Path to the workspace settings file."""
    return root / SETTINGS_FILE


def composer_path(root: Path) -> Path:
    return root / COMPOSER_FILE
