"""
Filesystem primitives used by resolution.

Existence checks never raise: any OSError means "not there".
Reading is the only operation allowed to fail loudly.
"""

from __future__ import annotations

import os
from typing import Callable, Optional

# Existence oracle signature shared by the normalizer, mapping table and cache.
ExistsFn = Callable[[str], bool]

TEMPLATE_SUFFIX = ".twig"


def exists(path: str) -> bool:
    """True if anything (file or directory) exists at path."""
    try:
        return os.path.exists(path)
    except (OSError, ValueError):
        return False


def is_file(path: str) -> bool:
    """True if path points to a regular file."""
    try:
        return os.path.isfile(path)
    except (OSError, ValueError):
        return False


def read_text(path: str) -> str:
    """
    Read a template as UTF-8. Raises OSError if the file is gone.

    Bytes that are not valid UTF-8 (legacy Latin-1 templates) become U+FFFD.
    """
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def resolve_template(path: str, *, is_file_fn: ExistsFn = is_file) -> Optional[str]:
    """
    Look for a template file at path.

    Tries the exact path first, then the same path with the `.twig` suffix,
    so that `{% include 'base.html' %}` finds `base.html.twig`.
    """
    for candidate in (path, path + TEMPLATE_SUFFIX):
        if is_file_fn(candidate):
            return candidate
    return None


__all__ = ["ExistsFn", "TEMPLATE_SUFFIX", "exists", "is_file", "read_text", "resolve_template"]
