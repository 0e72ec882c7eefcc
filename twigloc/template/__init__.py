"""
Twig template parsing: tree-sitter segmentation, tree and local symbols.
"""

from .positions import Position, Range
from .nodes import (
    TemplateNode,
    TextNode,
    OutputNode,
    CommentNode,
    TagNode,
    BlockTagNode,
    TemplateRoot,
    ParseError,
    TemplateTree,
)
from .parser import (
    PAIRED_TAGS,
    Segment,
    SegmentKind,
    TemplateParser,
    TwigDocument,
    TwigParser,
    opens_body,
    parse_template,
)
from .symbols import (
    SELF_ALIAS,
    TypeResolver,
    TwigImport,
    LocalVariable,
    Macro,
    Block,
    LocalSymbols,
    LocalSymbolCollector,
    parse_import,
)

__all__ = [
    "Position",
    "Range",
    "TemplateNode",
    "TextNode",
    "OutputNode",
    "CommentNode",
    "TagNode",
    "BlockTagNode",
    "TemplateRoot",
    "ParseError",
    "TemplateTree",
    "PAIRED_TAGS",
    "Segment",
    "SegmentKind",
    "TwigDocument",
    "TemplateParser",
    "TwigParser",
    "opens_body",
    "parse_template",
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
