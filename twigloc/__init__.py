"""
twig-locator: resolution of namespaced Twig template references and a
cache of parsed template documents.
"""

from .documents import Document, DocumentCache, ImportResolver, MappingTable
from .environment import NamespaceMapping
from .paths import extract_framework_root, normalize_directory

__all__ = [
    "Document",
    "DocumentCache",
    "ImportResolver",
    "MappingTable",
    "NamespaceMapping",
    "extract_framework_root",
    "normalize_directory",
]
