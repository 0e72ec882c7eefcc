"""
Document cache, mapping table and import resolution.
"""

from .document import Document
from .mappings import MappingTable
from .imports import ImportResolver, collect_imports, find_import
from .cache import DocumentCache

__all__ = [
    "Document",
    "MappingTable",
    "ImportResolver",
    "collect_imports",
    "find_import",
    "DocumentCache",
]
