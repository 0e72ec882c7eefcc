"""
Syntax tree nodes for Twig templates.

Immutable node hierarchy. Paired tags (`{% block %}...{% endblock %}`)
become `BlockTagNode` with children; everything else is a leaf.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .positions import Position, Range


@dataclass(frozen=True)
class TemplateNode:
    """Base class for all nodes."""
    range: Range

    @property
    def children(self) -> List["TemplateNode"]:
        return []

    def walk(self) -> Iterator["TemplateNode"]:
        """Pre-order traversal including self."""
        yield self
        for child in self.children:
            yield from child.walk()

    def deepest_at(self, pos: Position) -> Optional["TemplateNode"]:
        """Innermost node whose range contains pos."""
        if not self.range.contains(pos):
            return None
        for child in self.children:
            found = child.deepest_at(pos)
            if found is not None:
                return found
        return self


@dataclass(frozen=True)
class TextNode(TemplateNode):
    text: str


@dataclass(frozen=True)
class OutputNode(TemplateNode):
    """`{{ expression }}`"""
    expression: str


@dataclass(frozen=True)
class CommentNode(TemplateNode):
    """`{# text #}`"""
    text: str


@dataclass(frozen=True)
class TagNode(TemplateNode):
    """Standalone tag: `{% import ... %}`, `{% include ... %}`, inline `{% set %}`."""
    name: str
    args: str


@dataclass(frozen=True)
class BlockTagNode(TemplateNode):
    """
    Paired tag with a body.

    `closed` is False when the end tag was missing and the body was
    cut at the end of the template (or at an enclosing end tag).
    """
    name: str
    args: str
    body: List[TemplateNode] = field(default_factory=list)
    closed: bool = True

    @property
    def children(self) -> List[TemplateNode]:
        return self.body


@dataclass(frozen=True)
class TemplateRoot(TemplateNode):
    body: List[TemplateNode] = field(default_factory=list)

    @property
    def children(self) -> List[TemplateNode]:
        return self.body


@dataclass(frozen=True)
class ParseError:
    message: str
    range: Range


@dataclass(frozen=True)
class TemplateTree:
    """Result of parsing: root node plus recoverable syntax errors."""
    root: TemplateRoot
    errors: List[ParseError] = field(default_factory=list)

    @property
    def root_node(self) -> TemplateRoot:
        return self.root

    def deepest_at(self, pos: Position) -> Optional[TemplateNode]:
        return self.root.deepest_at(pos)


__all__ = [
    "TemplateNode",
    "TextNode",
    "OutputNode",
    "CommentNode",
    "TagNode",
    "BlockTagNode",
    "TemplateRoot",
    "ParseError",
    "TemplateTree",
]
