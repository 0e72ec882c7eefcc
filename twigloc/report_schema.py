"""
Response models of the CLI subcommands.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .config import Settings


class MappingEntry(BaseModel):
    namespace: str
    directory: str


class MappingsReport(BaseModel):
    mappings: List[MappingEntry] = Field(default_factory=list)


class ResolveReport(BaseModel):
    reference: str
    # None when the reference does not map to a file
    path: Optional[str] = None


class ImportEntry(BaseModel):
    name: str
    path: Optional[str] = None
    resolved: Optional[str] = None


class ImportsReport(BaseModel):
    file: str
    imports: List[ImportEntry] = Field(default_factory=list)


class DiagReport(BaseModel):
    version: str
    workspace: str
    framework: Optional[str] = None
    framework_root: Optional[str] = None
    mappings: int = 0
    settings: Settings


__all__ = [
    "MappingEntry",
    "MappingsReport",
    "ResolveReport",
    "ImportEntry",
    "ImportsReport",
    "DiagReport",
]
