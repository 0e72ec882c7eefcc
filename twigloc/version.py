from __future__ import annotations

from importlib import metadata

DIST_NAME = "twig-locator"


def tool_version() -> str:
    """Installed distribution version; "0.0.0" when run from a source tree."""
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["DIST_NAME", "tool_version"]
