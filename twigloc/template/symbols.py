"""
Local symbol collection.

Walks a template tree and gathers what a template declares: variables,
macros, blocks and `{% import %}` aliases. Blocks, macros, `for` loops
and `with` bodies open nested scopes; Twig requires macros to import
what they use, so imports found in a macro body land in that scope.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, runtime_checkable

from .nodes import BlockTagNode, CommentNode, TagNode, TemplateNode
from .positions import Position, Range

logger = logging.getLogger(__name__)

SELF_ALIAS = "_self"

_IMPORT_RE = re.compile(r"^(?P<source>.+?)\s+as\s+(?P<alias>[A-Za-z_][A-Za-z0-9_]*)\s*$", re.S)
_STRING_RE = re.compile(r"""^(['"])(?P<value>.*)\1$""", re.S)
_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_FOR_RE = re.compile(r"^(?P<targets>.+?)\s+in\s+", re.S)
_MACRO_RE = re.compile(r"^(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*(?:\((?P<params>.*)\))?", re.S)
_VAR_ANNOTATION_RE = re.compile(r"@var\s+(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s+(?P<type>\S+)")

# Scopes created by these paired tags
_SCOPED_TAGS = frozenset({"block", "macro", "for", "with"})


@runtime_checkable
class TypeResolver(Protocol):
    """Optional capability that turns a type name into type information."""

    def resolve_type(self, type_name: str) -> Optional[Any]:
        ...


@dataclass(frozen=True)
class TwigImport:
    """`{% import 'path' as name %}`; path is None for `_self`."""
    name: str
    path: Optional[str]
    range: Optional[Range] = None


@dataclass(frozen=True)
class LocalVariable:
    name: str
    range: Range
    type: Optional[str] = None
    type_info: Any = None


@dataclass(frozen=True)
class Macro:
    name: str
    params: List[str]
    range: Range


@dataclass(frozen=True)
class Block:
    name: str
    range: Range


@dataclass
class LocalSymbols:
    """Symbol table of a template or of one scope inside it."""
    range: Optional[Range] = None
    variables: List[LocalVariable] = field(default_factory=list)
    macros: List[Macro] = field(default_factory=list)
    blocks: List[Block] = field(default_factory=list)
    imports: List[TwigImport] = field(default_factory=list)
    scopes: List["LocalSymbols"] = field(default_factory=list)

    def scope_chain_at(self, pos: Position) -> List["LocalSymbols"]:
        """Nested scopes containing pos, outermost first (self excluded)."""
        chain: List[LocalSymbols] = []
        current = self
        while True:
            inner = next(
                (s for s in current.scopes if s.range is not None and s.range.contains(pos)),
                None,
            )
            if inner is None:
                return chain
            chain.append(inner)
            current = inner


def parse_import(args: str, range_: Optional[Range] = None) -> Optional[TwigImport]:
    """
    Parse the arguments of an import tag.

    `'macros.twig' as m` -> TwigImport("m", "macros.twig")
    `_self as m`         -> TwigImport("m", None)
    Dynamic sources (`tpl_var as m`) cannot be resolved statically -> None.
    """
    match = _IMPORT_RE.match(args.strip())
    if not match:
        return None
    source = match.group("source").strip()
    alias = match.group("alias")
    if source == SELF_ALIAS:
        return TwigImport(name=alias, path=None, range=range_)
    literal = _STRING_RE.match(source)
    if literal is None:
        return None
    return TwigImport(name=alias, path=literal.group("value"), range=range_)


class LocalSymbolCollector:
    """
    Collects LocalSymbols from a tree.

    The type resolver is optional; without one, `@var` annotations keep
    their raw type names.
    """

    def __init__(self, root: TemplateNode, type_resolver: Optional[TypeResolver] = None):
        self.root = root
        self.type_resolver = type_resolver

    def collect(self) -> LocalSymbols:
        symbols = LocalSymbols(range=self.root.range)
        self._visit_children(self.root, symbols)
        return symbols

    def _visit_children(self, node: TemplateNode, scope: LocalSymbols) -> None:
        for child in node.children:
            self._visit(child, scope)

    def _visit(self, node: TemplateNode, scope: LocalSymbols) -> None:
        if isinstance(node, TagNode):
            self._visit_tag(node, scope)
        elif isinstance(node, BlockTagNode):
            self._visit_block_tag(node, scope)
        elif isinstance(node, CommentNode):
            self._visit_comment(node, scope)

    def _visit_tag(self, node: TagNode, scope: LocalSymbols) -> None:
        if node.name == "import":
            twig_import = parse_import(node.args, node.range)
            if twig_import is not None:
                scope.imports.append(twig_import)
        elif node.name == "set":
            targets = node.args.split("=", 1)[0]
            for name in _NAME_RE.findall(targets):
                scope.variables.append(LocalVariable(name=name, range=node.range))
        elif node.name == "block":
            name = node.args.split(None, 1)[0] if node.args else ""
            if name:
                scope.blocks.append(Block(name=name, range=node.range))

    def _visit_block_tag(self, node: BlockTagNode, scope: LocalSymbols) -> None:
        if node.name not in _SCOPED_TAGS:
            if node.name == "set":
                for name in _NAME_RE.findall(node.args):
                    scope.variables.append(LocalVariable(name=name, range=node.range))
            self._visit_children(node, scope)
            return

        inner = LocalSymbols(range=node.range)

        if node.name == "block":
            name = node.args.split(None, 1)[0] if node.args else ""
            if name:
                scope.blocks.append(Block(name=name, range=node.range))
        elif node.name == "macro":
            match = _MACRO_RE.match(node.args)
            if match:
                params = [
                    _NAME_RE.match(p.strip()).group(0)
                    for p in (match.group("params") or "").split(",")
                    if _NAME_RE.match(p.strip())
                ]
                scope.macros.append(Macro(name=match.group("name"), params=params, range=node.range))
                for param in params:
                    inner.variables.append(LocalVariable(name=param, range=node.range))
        elif node.name == "for":
            match = _FOR_RE.match(node.args)
            if match:
                for name in _NAME_RE.findall(match.group("targets")):
                    inner.variables.append(LocalVariable(name=name, range=node.range))
            inner.variables.append(LocalVariable(name="loop", range=node.range))

        self._visit_children(node, inner)
        scope.scopes.append(inner)

    def _visit_comment(self, node: CommentNode, scope: LocalSymbols) -> None:
        for match in _VAR_ANNOTATION_RE.finditer(node.text):
            type_name = match.group("type")
            type_info = None
            if self.type_resolver is not None:
                type_info = self.type_resolver.resolve_type(type_name)
            scope.variables.append(
                LocalVariable(
                    name=match.group("name"),
                    range=node.range,
                    type=type_name,
                    type_info=type_info,
                )
            )


__all__ = [
    "SELF_ALIAS",
    "TypeResolver",
    "TwigImport",
    "LocalVariable",
    "Macro",
    "Block",
    "LocalSymbols",
    "LocalSymbolCollector",
    "parse_import",
]
