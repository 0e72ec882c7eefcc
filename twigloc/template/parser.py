"""
Error-tolerant parser for Twig templates.

The `twig` grammar from tree-sitter-language-pack tokenizes the source.
Its tree is flat (an `{% endblock %}` is just another directive), so the
directives it yields are folded into a TemplateTree where paired tags own
their bodies. Only tag structure is parsed: expressions stay as raw
strings. Parsing is total: malformed input produces a best-effort tree
plus entries in `tree.errors`.
"""

from __future__ import annotations

import bisect
import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Protocol, Tuple, runtime_checkable

from tree_sitter import Node, Parser, Tree
from tree_sitter_language_pack import get_parser

from .nodes import (
    BlockTagNode,
    CommentNode,
    OutputNode,
    ParseError,
    TagNode,
    TemplateNode,
    TemplateRoot,
    TemplateTree,
    TextNode,
)
from .positions import Position, Range

logger = logging.getLogger(__name__)

TWIG_LANGUAGE = "twig"

# Tags that open a body closed by `end<name>`
PAIRED_TAGS = frozenset({
    "apply",
    "autoescape",
    "block",
    "cache",
    "embed",
    "filter",
    "for",
    "guard",
    "if",
    "macro",
    "sandbox",
    "set",
    "spaceless",
    "verbatim",
    "raw",
    "with",
})

# Tags whose body is raw text up to the matching end tag
_RAW_TAGS = frozenset({"verbatim", "raw"})

_ASSIGNMENT_RE = re.compile(r"^[^=]*(?<![=!<>])=(?!=)")
_TAG_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class SegmentKind(enum.Enum):
    """Kinds of top-level pieces of a Twig source."""
    TEXT = "TEXT"
    OUTPUT = "OUTPUT"      # {{ ... }}
    TAG = "TAG"            # {% ... %}
    COMMENT = "COMMENT"    # {# ... #}


_OPENERS = {
    b"{{": SegmentKind.OUTPUT,
    b"{{-": SegmentKind.OUTPUT,
    b"{{~": SegmentKind.OUTPUT,
    b"{%": SegmentKind.TAG,
    b"{%-": SegmentKind.TAG,
    b"{%~": SegmentKind.TAG,
}

_CLOSERS = {
    SegmentKind.OUTPUT: frozenset({b"}}", b"-}}", b"~}}"}),
    SegmentKind.TAG: frozenset({b"%}", b"-%}", b"~%}"}),
}


@dataclass(frozen=True)
class Segment:
    """
    One text run or delimited construct with its source range.

    `value` is the inner content with whitespace-control modifiers
    (`-`, `~`) and surrounding blanks stripped.
    """
    kind: SegmentKind
    value: str
    range: Range
    start_byte: int
    end_byte: int
    closed: bool = True

    @property
    def tag_name(self) -> str:
        """First word of a TAG segment ("" for other kinds)."""
        if self.kind != SegmentKind.TAG:
            return ""
        match = _TAG_NAME_RE.match(self.value)
        return match.group(0) if match else ""

    @property
    def tag_args(self) -> str:
        name = self.tag_name
        return self.value[len(name):].strip() if name else self.value


@runtime_checkable
class TemplateParser(Protocol):
    """Parser service: text -> tree, total over any input."""

    def parse(self, text: str) -> TemplateTree:
        ...


def opens_body(name: str, args: str) -> bool:
    """
    Whether a paired tag actually opens a body.

    `{% set x = 1 %}` and `{% block title 'Home' %}` are inline forms.
    """
    if name not in PAIRED_TAGS:
        return False
    if name == "set":
        return _ASSIGNMENT_RE.match(args) is None
    if name == "block":
        return len(args.split(None, 1)) <= 1
    return True


class TwigDocument:
    """
    Tree-sitter parse of a Twig source.

    Splits the source into segments by walking the leaves of the syntax
    tree: delimiter tokens start and end directives, `comment` tokens are
    comments and the bytes in between are text. Offsets reported by
    tree-sitter are UTF-8 byte offsets and get mapped back to LSP
    positions here.
    """

    def __init__(self, text: str):
        self.text = text
        self.text_bytes = text.encode("utf-8")
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", text)]
        self.tree: Tree = self.get_parser().parse(self.text_bytes)

    @staticmethod
    def get_parser() -> Parser:
        return get_parser(TWIG_LANGUAGE)

    @property
    def root_node(self) -> Node:
        return self.tree.root_node

    def leaves(self, start_node: Optional[Node] = None) -> Iterator[Node]:
        """Leaf tokens in source order; a comment counts as one token."""
        node = self.root_node if start_node is None else start_node
        if node.type == "comment" or node.child_count == 0:
            yield node
            return
        for child in node.children:
            yield from self.leaves(child)

    def node_bytes(self, node: Node) -> bytes:
        return self.text_bytes[node.start_byte:node.end_byte]

    def byte_to_char_position(self, byte_pos: int) -> int:
        if byte_pos <= 0:
            return 0
        if byte_pos >= len(self.text_bytes):
            return len(self.text)
        return len(self.text_bytes[:byte_pos].decode("utf-8", errors="ignore"))

    def position_at(self, byte_pos: int) -> Position:
        offset = self.byte_to_char_position(byte_pos)
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return Position(line, offset - self._line_starts[line])

    def range_of(self, start_byte: int, end_byte: int) -> Range:
        return Range(self.position_at(start_byte), self.position_at(end_byte))

    @property
    def end(self) -> Position:
        return self.position_at(len(self.text_bytes))

    def segments(self) -> List[Segment]:
        return _fold_raw_bodies(self, _Segmenter(self).run())


class _Segmenter:
    def __init__(self, doc: TwigDocument):
        self.doc = doc
        self.out: List[Segment] = []
        self.consumed = 0
        # (kind, start of opener, end of opener)
        self.pending: Optional[Tuple[SegmentKind, int, int]] = None

    def run(self) -> List[Segment]:
        size = len(self.doc.text_bytes)
        for leaf in self.doc.leaves():
            if leaf.is_missing or leaf.start_byte < self.consumed:
                continue
            data = self.doc.node_bytes(leaf)
            if self.pending is not None:
                self._inside_directive(leaf, data)
            elif data in _OPENERS:
                self._text(leaf.start_byte)
                self.pending = (_OPENERS[data], leaf.start_byte, leaf.end_byte)
            elif data.startswith(b"{#"):
                self._comment(leaf, data)
                if self.consumed >= size:
                    break

        if self.pending is not None:
            self._directive(size, size, closed=False)
        else:
            self._text(size)
        return self.out

    def _inside_directive(self, leaf: Node, data: bytes) -> None:
        kind = self.pending[0]
        if data in _CLOSERS[kind]:
            self._directive(leaf.start_byte, leaf.end_byte, closed=True)
        elif data in _OPENERS:
            # A new directive starts before the previous one was closed
            self._directive(leaf.start_byte, leaf.start_byte, closed=False)
            self.pending = (_OPENERS[data], leaf.start_byte, leaf.end_byte)

    def _text(self, end_byte: int) -> None:
        if end_byte <= self.consumed:
            return
        start = self.consumed
        value = self.doc.text_bytes[start:end_byte].decode("utf-8", errors="replace")
        self.out.append(
            Segment(SegmentKind.TEXT, value, self.doc.range_of(start, end_byte), start, end_byte)
        )
        self.consumed = end_byte

    def _directive(self, body_end: int, end_byte: int, closed: bool) -> None:
        kind, start, body_start = self.pending
        body = self.doc.text_bytes[body_start:body_end].decode("utf-8", errors="replace")
        self.out.append(
            Segment(
                kind,
                _strip_modifiers(body),
                self.doc.range_of(start, end_byte),
                start,
                end_byte,
                closed,
            )
        )
        self.pending = None
        self.consumed = end_byte

    def _comment(self, leaf: Node, data: bytes) -> None:
        self._text(leaf.start_byte)
        closed = len(data) >= 4 and data.endswith(b"#}")
        # An unterminated comment swallows the rest of the template
        end_byte = leaf.end_byte if closed else len(self.doc.text_bytes)
        body_end = end_byte - 2 if closed else end_byte
        body = self.doc.text_bytes[leaf.start_byte + 2:body_end].decode("utf-8", errors="replace")
        self.out.append(
            Segment(
                SegmentKind.COMMENT,
                _strip_modifiers(body),
                self.doc.range_of(leaf.start_byte, end_byte),
                leaf.start_byte,
                end_byte,
                closed,
            )
        )
        self.consumed = end_byte


def _fold_raw_bodies(doc: TwigDocument, segments: List[Segment]) -> List[Segment]:
    """Turn everything between `{% verbatim %}` and `{% endverbatim %}` into one text run."""
    out: List[Segment] = []
    i = 0
    while i < len(segments):
        segment = segments[i]
        out.append(segment)
        i += 1
        if segment.tag_name not in _RAW_TAGS or not segment.closed:
            continue
        end_name = "end" + segment.tag_name
        j = i
        while j < len(segments) and segments[j].tag_name != end_name:
            j += 1
        if j > i:
            body_start = segment.end_byte
            body_end = segments[j].start_byte if j < len(segments) else len(doc.text_bytes)
            out.append(
                Segment(
                    SegmentKind.TEXT,
                    doc.text_bytes[body_start:body_end].decode("utf-8", errors="replace"),
                    doc.range_of(body_start, body_end),
                    body_start,
                    body_end,
                )
            )
        i = j
    return out


def _strip_modifiers(body: str) -> str:
    if body[:1] in ("-", "~"):
        body = body[1:]
    if body[-1:] in ("-", "~"):
        body = body[:-1]
    return body.strip()


@dataclass
class _Frame:
    name: str
    args: str
    start: Position
    body: List[TemplateNode] = field(default_factory=list)


class TwigParser:
    """Default parser service backed by the tree-sitter twig grammar."""

    def parse(self, text: str) -> TemplateTree:
        doc = TwigDocument(text)
        segments = doc.segments()
        tree = _TreeBuilder(segments, doc.end).build()
        if doc.root_node.has_error:
            logger.debug("Twig grammar reported syntax errors; tree built with recovery")
        logger.debug(f"Parsed template: {len(segments)} segments, {len(tree.errors)} errors")
        return tree


class _TreeBuilder:
    def __init__(self, segments: List[Segment], end: Position):
        self.segments = segments
        self.end = end
        self.root = _Frame(name="", args="", start=Position(0, 0))
        self.stack: List[_Frame] = [self.root]
        self.errors: List[ParseError] = []

    def build(self) -> TemplateTree:
        for segment in self.segments:
            if not segment.closed:
                self.errors.append(ParseError(f"Unclosed {segment.kind.name.lower()}", segment.range))
            self._feed(segment)

        while len(self.stack) > 1:
            frame = self.stack[-1]
            self.errors.append(
                ParseError(f"Missing end{frame.name}", Range(frame.start, self.end))
            )
            self._close(self.end, closed=False)

        root = TemplateRoot(range=Range(Position(0, 0), self.end), body=self.root.body)
        return TemplateTree(root=root, errors=self.errors)

    def _feed(self, segment: Segment) -> None:
        current = self.stack[-1].body
        if segment.kind == SegmentKind.TEXT:
            current.append(TextNode(range=segment.range, text=segment.value))
        elif segment.kind == SegmentKind.OUTPUT:
            current.append(OutputNode(range=segment.range, expression=segment.value))
        elif segment.kind == SegmentKind.COMMENT:
            current.append(CommentNode(range=segment.range, text=segment.value))
        else:
            self._feed_tag(segment)

    def _feed_tag(self, segment: Segment) -> None:
        name, args = segment.tag_name, segment.tag_args

        if name.startswith("end") and name[3:] in PAIRED_TAGS:
            self._end_tag(name[3:], segment)
            return

        if opens_body(name, args):
            self.stack.append(_Frame(name=name, args=args, start=segment.range.start))
            return

        self.stack[-1].body.append(TagNode(range=segment.range, name=name, args=args))

    def _end_tag(self, name: str, segment: Segment) -> None:
        depth = next(
            (i for i in range(len(self.stack) - 1, 0, -1) if self.stack[i].name == name),
            None,
        )
        if depth is None:
            self.errors.append(ParseError(f"Unexpected end{name}", segment.range))
            return

        # Frames opened after the matching one were never closed
        while len(self.stack) - 1 > depth:
            frame = self.stack[-1]
            self.errors.append(
                ParseError(f"Missing end{frame.name}", Range(frame.start, segment.range.start))
            )
            self._close(segment.range.start, closed=False)

        self._close(segment.range.end, closed=True)

    def _close(self, end: Position, closed: bool) -> None:
        frame = self.stack.pop()
        node = BlockTagNode(
            range=Range(frame.start, end),
            name=frame.name,
            args=frame.args,
            body=frame.body,
            closed=closed,
        )
        self.stack[-1].body.append(node)


def parse_template(text: str) -> TemplateTree:
    return TwigParser().parse(text)


__all__ = [
    "PAIRED_TAGS",
    "Segment",
    "SegmentKind",
    "TemplateParser",
    "TwigDocument",
    "TwigParser",
    "opens_body",
    "parse_template",
]
