"""
Settings loading and framework detection.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import SettingsError
from .model import FrameworkOption, Settings
from .paths import SETTINGS_SECTION, composer_path, settings_path

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Reads a YAML file and returns a mapping ({} for a missing or empty file)."""
    if not path.is_file():
        return {}
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise SettingsError(f"Invalid YAML: {e}", str(path))
    if not isinstance(raw, dict):
        raise SettingsError("YAML must be a mapping", str(path))
    return raw


def settings_from_dict(raw: dict, source: str = "") -> Settings:
    """
    Validate a settings mapping.

    Accepts both the bare settings and the editor form nested under `twiggy:`.
    """
    if SETTINGS_SECTION in raw and isinstance(raw[SETTINGS_SECTION], dict):
        raw = raw[SETTINGS_SECTION]
    try:
        return Settings.model_validate(raw)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings: {e}", source)


def load_settings(root: Path, path: Optional[Path] = None) -> Settings:
    """
    Load workspace settings.

    Args:
        root: Workspace root
        path: Explicit settings file (defaults to <root>/twigloc.yaml)

    Returns:
        Settings; defaults when no file exists
    """
    file = path or settings_path(root)
    raw = _read_yaml_map(file)
    if not raw:
        logger.debug(f"No settings in {file}, using defaults")
        return Settings()
    return settings_from_dict(raw, str(file))


def guess_framework(root: Path) -> Optional[FrameworkOption]:
    """
    Guess the framework from composer.json requirements.

    symfony/twig-bundle -> symfony, craftcms/cms -> craft, otherwise None.
    """
    composer = composer_path(root)
    if not composer.is_file():
        return None
    try:
        data = json.loads(composer.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Failed to read {composer}: {e}")
        return None

    require = data.get("require") if isinstance(data, dict) else None
    if not isinstance(require, dict):
        return None
    if "symfony/twig-bundle" in require:
        return FrameworkOption.SYMFONY
    if "craftcms/cms" in require:
        return FrameworkOption.CRAFT
    return None


__all__ = ["load_settings", "settings_from_dict", "guess_framework"]
