"""
Document cache with namespaced path resolution.

Owns the loaded documents (keyed by canonical URI) and the mapping table
used to turn `@Namespace/path.twig` references into files.
"""

from __future__ import annotations

import logging
import os
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from ..environment import FrameworkEnvironment, NamespaceMapping
from ..fs import ExistsFn, exists as fs_exists, is_file as fs_is_file, read_text as fs_read_text, resolve_template
from ..paths import include_path
from ..template import LocalSymbolCollector, Position, TemplateParser, TwigParser, TypeResolver
from ..uri import document_uri_to_fs_path, to_document_uri
from .document import Document
from .imports import ImportResolver
from .mappings import MappingTable

logger = logging.getLogger(__name__)


class DocumentCache:
    """
    Cache of parsed templates.

    All resolution methods return None for references that do not map
    to a file. Reading a file is the only thing that may raise (OSError),
    and it happens inside `set_text`.
    """

    def __init__(
        self,
        workspace_root: str,
        *,
        parser: Optional[TemplateParser] = None,
        exists: ExistsFn = fs_exists,
        is_file: ExistsFn = fs_is_file,
        read_text: Callable[[str], str] = fs_read_text,
    ):
        self.workspace_root = document_uri_to_fs_path(str(workspace_root))
        self._parser = parser or TwigParser()
        self._is_file = is_file
        self._read_text = read_text
        self._type_resolver: Optional[TypeResolver] = None
        self._mappings = MappingTable(self.workspace_root, exists=exists)
        self._documents: Dict[str, Document] = {}
        self._imports = ImportResolver(self)

    # ------------------------------------------------------------------ #
    # Configuration

    def configure(
        self,
        environment: FrameworkEnvironment,
        type_resolver: Optional[TypeResolver] = None,
        framework_root: Optional[str] = None,
        user_mappings: Optional[Sequence[NamespaceMapping]] = None,
    ) -> None:
        """Replace configuration; the mapping table is rebuilt on next use."""
        self._type_resolver = type_resolver
        self._mappings.configure(environment, framework_root, user_mappings)

    @property
    def framework_root(self) -> Optional[str]:
        return self._mappings.framework_root

    @property
    def mapping_table(self) -> MappingTable:
        return self._mappings

    def effective_mappings(self) -> List[NamespaceMapping]:
        return self._mappings.effective()

    @property
    def documents(self) -> Mapping[str, Document]:
        return MappingProxyType(self._documents)

    def __contains__(self, uri: str) -> bool:
        return to_document_uri(uri) in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    # ------------------------------------------------------------------ #
    # Loading

    def get(self, uri: str, text: Optional[str] = None) -> Document:
        """
        Cached document for uri, loaded on first access.

        An explicit text always reloads; without text a cached document is
        returned as is (no disk read) once it has been loaded.
        """
        uri = to_document_uri(uri)
        document = self._documents.get(uri)

        if document is None:
            return self._add(uri, text)

        if document.text is None or text is not None:
            self.set_text(document, text)

        return document

    def update_text(self, uri: str, text: Optional[str] = None) -> Document:
        return self.get(uri, text)

    def set_text(self, document: Document, text: Optional[str] = None) -> None:
        """
        Load text into a document and reparse it.

        Without text, reads the file behind the document's URI. The new
        tree and symbols are built before anything is assigned, so a failed
        read leaves the previous state intact.
        """
        if text is None:
            text = self._read_text(document.path)

        tree = self._parser.parse(text)
        symbols = LocalSymbolCollector(tree.root_node, self._type_resolver).collect()

        document.text, document.tree, document.locals = text, tree, symbols

    def remove(self, uri: str) -> None:
        self._documents.pop(to_document_uri(uri), None)

    def refresh(self, uri: str) -> None:
        """Reload a cached document from disk; unknown URIs are ignored."""
        document = self._documents.get(to_document_uri(uri))
        if document is not None:
            self.set_text(document)

    def _add(self, uri: str, text: Optional[str] = None) -> Document:
        document = Document(uri)
        self.set_text(document, text)
        self._documents[document.uri] = document
        logger.debug(f"Cached {document.uri}")
        return document

    # ------------------------------------------------------------------ #
    # Resolution

    def _search_roots(self) -> List[str]:
        roots = [self.workspace_root]
        if self.framework_root:
            roots.append(os.path.join(self.workspace_root, self.framework_root))
        return roots

    def resolve_by_namespaced_path(self, reference: str) -> Optional[Document]:
        """
        Document a template reference points to.

        Mappings are tried in order; a matching namespace whose target does
        not exist does not stop later mappings with the same namespace.
        """
        for mapping in self._mappings.matching(reference):
            target = include_path(reference, mapping.namespace, mapping.directory)

            for root in self._search_roots():
                candidate = os.path.abspath(os.path.join(root, target))
                uri = to_document_uri(candidate)

                cached = self._documents.get(uri)
                if cached is not None:
                    logger.debug(f"Resolved {reference!r} from cache: {uri}")
                    return cached

                found = resolve_template(candidate, is_file_fn=self._is_file)
                if found is not None:
                    logger.debug(f"Resolved {reference!r} via {mapping.namespace!r} -> {found}")
                    return self.get(found)

        logger.debug(f"Unresolved template reference {reference!r}")
        return None

    def resolve_import(
        self,
        document: Document,
        alias: str,
        position: Optional[Position] = None,
    ) -> Optional[Document]:
        return self._imports.resolve(document, alias, position)


__all__ = ["DocumentCache"]
