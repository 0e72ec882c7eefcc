"""
Import alias lookup scoped to a position.

The visible import table at a position is the document-level imports
followed by the imports of each enclosing scope, outermost first. Lookup
takes the first match, so a document-level alias wins over a same-named
alias declared inside a block or macro.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional

from ..template import Position, SELF_ALIAS, TwigImport
from .document import Document

if TYPE_CHECKING:
    from .cache import DocumentCache


def collect_imports(document: Document, position: Optional[Position] = None) -> List[TwigImport]:
    """Merged import table; never mutates the document's own lists."""
    imports = list(document.locals.imports)
    if position is not None:
        for scope in document.scopes_at(position):
            imports.extend(scope.imports)
    return imports


def find_import(imports: Iterable[TwigImport], name: str) -> Optional[TwigImport]:
    return next((imp for imp in imports if imp.name == name), None)


class ImportResolver:
    """Resolves import aliases of a document to the imported documents."""

    def __init__(self, cache: "DocumentCache"):
        self._cache = cache

    def resolve(
        self,
        document: Document,
        alias: str,
        position: Optional[Position] = None,
    ) -> Optional[Document]:
        """
        Document an alias refers to.

        `_self` and path-less imports (`{% import _self as m %}`) resolve
        to the document itself; unknown aliases and unresolvable paths to None.
        """
        if alias == SELF_ALIAS:
            return document

        twig_import = find_import(collect_imports(document, position), alias)
        if twig_import is None:
            return None
        if twig_import.path is None:
            return document
        return self._cache.resolve_by_namespaced_path(twig_import.path)


__all__ = ["collect_imports", "find_import", "ImportResolver"]
