"""
Test doubles for filesystem checks and console runs.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterable, List, Optional, Tuple


class ExistsSpy:
    """
    Existence oracle that counts calls.

    Without `present` it delegates to the real filesystem; with it, only
    the listed paths (normalized) exist.
    """

    def __init__(self, present: Optional[Iterable[str]] = None):
        self.calls: List[str] = []
        self._present = None if present is None else {os.path.normpath(p) for p in present}

    def __call__(self, path: str) -> bool:
        self.calls.append(path)
        if self._present is None:
            return os.path.exists(path)
        return os.path.normpath(path) in self._present

    @property
    def count(self) -> int:
        return len(self.calls)


class StubRunner:
    """
    CommandRunner stub: maps a console subcommand to a JSON payload.

    Unknown subcommands behave like a failed process (None).
    """

    def __init__(self, outputs: Optional[Dict[str, Any]] = None):
        self.outputs = outputs or {}
        self.calls: List[Tuple[List[str], str]] = []

    def __call__(self, argv: List[str], cwd: str) -> Optional[str]:
        self.calls.append((argv, cwd))
        command = argv[2] if len(argv) > 2 else ""
        if command not in self.outputs:
            return None
        payload = self.outputs[command]
        return payload if isinstance(payload, str) else json.dumps(payload)


__all__ = ["ExistsSpy", "StubRunner"]
