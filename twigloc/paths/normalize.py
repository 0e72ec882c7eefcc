"""
Normalization of template directories reported by frameworks or typed by users.

Frameworks report directories in many shapes: absolute paths from inside a
container, Windows paths, "/templates" meaning "templates" relative to the
project, paths relative to an application living in a subdirectory of the
workspace. The normalizer turns each of them into a directory that can be
joined with a template reference, using the filesystem as the oracle.

Each branch is an ordered list of candidates `(checked_path, result)`; the first
candidate whose checked path exists wins, otherwise a best-effort fallback is used.
"""

from __future__ import annotations

import os
import posixpath
import re
from typing import Iterable, Iterator, Optional, Tuple

from ..fs import ExistsFn, exists as fs_exists

# (path to check on disk, value to return when it exists)
Candidate = Tuple[str, str]

_CONSOLE_RE = re.compile(r"^(?:(?P<root>.*)/)?bin/console$")


def _to_posix(path: str) -> str:
    return path.replace("\\", "/")


def _strip_root(path: str) -> str:
    """'/templates' -> 'templates', 'C:/templates' -> 'templates'."""
    _, rest = os.path.splitdrive(path)
    return rest.lstrip("/")


def _relative_to_workspace(path: str, workspace_root: str) -> str:
    """Make an absolute path relative to the workspace if it lies inside it."""
    root = _to_posix(workspace_root).rstrip("/")
    if path == root:
        return ""
    if path.startswith(root + "/"):
        return path[len(root) + 1:]
    return path


def _first_existing(candidates: Iterable[Candidate], fallback: str, exists: ExistsFn) -> str:
    for checked_path, result in candidates:
        if exists(checked_path):
            return result
    return fallback


def _absolute_candidates(
    path: str,
    workspace_root: str,
    framework_root: Optional[str],
) -> Iterator[Candidate]:
    # Real absolute path: keep it, relative to the workspace when inside
    yield path, _relative_to_workspace(path, workspace_root)

    # Absolute-looking but actually project relative
    stripped = _strip_root(path)
    yield os.path.join(workspace_root, stripped), stripped

    if framework_root:
        yield (
            os.path.join(workspace_root, framework_root, stripped),
            posixpath.join(framework_root, stripped),
        )


def _relative_candidates(
    path: str,
    workspace_root: str,
    framework_root: str,
) -> Iterator[Candidate]:
    yield os.path.join(workspace_root, path), path
    yield (
        os.path.join(workspace_root, framework_root, path),
        posixpath.join(framework_root, path),
    )


def normalize_directory(
    directory: str,
    workspace_root: str,
    framework_root: Optional[str] = None,
    *,
    exists: ExistsFn = fs_exists,
) -> str:
    """
    Normalize a template directory for resolution.

    Args:
        directory: Raw directory (e.g. from `debug:twig` output or user settings)
        workspace_root: Workspace folder path
        framework_root: Optional framework root relative to workspace ("app" for "app/bin/console")
        exists: Existence oracle

    Returns:
        Directory usable for joining with template references. Never raises;
        unknown filesystem state degrades to a relative path.
    """
    normalized = _to_posix(directory)

    # Leading slash on a path the host does not consider absolute
    if normalized.startswith("/") and not os.path.isabs(normalized):
        normalized = normalized[1:]

    if os.path.isabs(normalized):
        return _first_existing(
            _absolute_candidates(normalized, workspace_root, framework_root),
            fallback=_strip_root(normalized),
            exists=exists,
        )

    if not framework_root:
        return normalized

    return _first_existing(
        _relative_candidates(normalized, workspace_root, framework_root),
        fallback=normalized,
        exists=exists,
    )


def extract_framework_root(console_path: str) -> Optional[str]:
    """
    Framework root from a console path.

    "app/bin/console" -> "app", "apps/main/bin/console" -> "apps/main",
    "bin/console" and "./bin/console" -> None (framework lives in the workspace root).
    """
    if not console_path:
        return None

    match = _CONSOLE_RE.match(_to_posix(console_path))
    if not match:
        return None

    root = match.group("root") or ""
    while root.startswith("./"):
        root = root[2:]
    root = root.rstrip("/")

    if root in ("", "."):
        return None
    return root


def include_path(reference: str, namespace: str, directory: str) -> str:
    """
    Substitute the mapping directory for the namespace of a reference.

    ("partials/a.twig", "", "templates") -> "templates/partials/a.twig"
    ("@Bundle/a.twig", "@Bundle", "src/views") -> "src/views/a.twig"
    """
    if namespace == "":
        joined = f"{directory}/{reference}" if directory else reference
        return posixpath.normpath(joined)
    return directory + reference[len(namespace):]


__all__ = [
    "Candidate",
    "normalize_directory",
    "extract_framework_root",
    "include_path",
]
