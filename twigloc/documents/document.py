"""
In-memory representation of one template file.
"""

from __future__ import annotations

from typing import List, Optional

from ..template import LocalSymbols, Position, TemplateNode, TemplateTree
from ..uri import document_uri_to_fs_path, to_document_uri


class Document:
    """
    One loaded template: raw text, syntax tree and local symbols.

    Owned by DocumentCache; `text`, `tree` and `locals` are only replaced
    through `DocumentCache.set_text`.
    """

    def __init__(self, uri: str):
        self.uri = to_document_uri(uri)
        self.text: Optional[str] = None
        self.tree: Optional[TemplateTree] = None
        self.locals: LocalSymbols = LocalSymbols()

    @property
    def path(self) -> str:
        """Filesystem path of the document."""
        return document_uri_to_fs_path(self.uri)

    @property
    def loaded(self) -> bool:
        return self.text is not None

    def scopes_at(self, pos: Position) -> List[LocalSymbols]:
        """Enclosing scopes of pos, outermost first."""
        return self.locals.scope_chain_at(pos)

    def deepest_at(self, pos: Position) -> Optional[TemplateNode]:
        if self.tree is None:
            return None
        return self.tree.deepest_at(pos)

    def __repr__(self) -> str:
        state = "loaded" if self.loaded else "empty"
        return f"Document({self.uri!r}, {state})"


__all__ = ["Document"]
