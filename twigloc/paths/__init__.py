"""
Template directory normalization and namespaced path arithmetic.

Pure helpers: the only side effect is checking the filesystem through
an injectable `exists` oracle.
"""

from .normalize import (
    normalize_directory,
    extract_framework_root,
    include_path,
)

__all__ = [
    "normalize_directory",
    "extract_framework_root",
    "include_path",
]
