"""
Text positions in the LSP convention: zero-based line and character.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Position:
    line: int
    character: int

    def __repr__(self) -> str:
        return f"{self.line}:{self.character}"


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    def contains(self, pos: Position) -> bool:
        """Inclusive on both ends: a cursor right after a closing tag is still inside."""
        return self.start <= pos <= self.end

    def __repr__(self) -> str:
        return f"Range({self.start!r}-{self.end!r})"


__all__ = ["Position", "Range"]
