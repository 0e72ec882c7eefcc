"""
Conversion between document URIs and filesystem paths.

Documents are keyed by canonical `file://` URIs. Callers may pass either
a URI or a plain filesystem path; both map to the same key.
"""

from __future__ import annotations

import os
from pathlib import Path
from urllib.parse import unquote, urlparse

FILE_SCHEME = "file"


def is_uri(value: str) -> bool:
    return value.startswith(FILE_SCHEME + "://")


def document_uri_to_fs_path(uri: str) -> str:
    """
    Convert a `file://` URI to an absolute filesystem path.

    Plain paths are returned normalized, so this is safe to call twice.
    """
    if not is_uri(uri):
        return os.path.normpath(uri)

    parsed = urlparse(uri)
    path = unquote(parsed.path)
    # file:///C:/dir on Windows parses to "/C:/dir"
    if os.name == "nt" and len(path) > 2 and path[0] == "/" and path[2] == ":":
        path = path[1:]
    if parsed.netloc and parsed.netloc != "localhost":
        path = f"//{parsed.netloc}{path}"
    return os.path.normpath(path)


def to_document_uri(value: str) -> str:
    """
    Canonical URI for a path or URI.

    Round-trips through the filesystem form so that differently escaped
    spellings of the same file share one cache key.
    """
    fs_path = document_uri_to_fs_path(value)
    return Path(os.path.abspath(fs_path)).as_uri()


__all__ = ["FILE_SCHEME", "is_uri", "document_uri_to_fs_path", "to_document_uri"]
