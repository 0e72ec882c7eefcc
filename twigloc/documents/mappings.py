"""
Effective namespace mapping table.

Framework-reported mappings followed by user mappings, every directory
normalized. The normalized list is memoized; `invalidate()` is the single
entry point that drops it and `configure()` always goes through it.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..environment import EMPTY_ENVIRONMENT, FrameworkEnvironment, NamespaceMapping
from ..fs import ExistsFn, exists as fs_exists
from ..paths import normalize_directory

logger = logging.getLogger(__name__)


class MappingTable:
    """
    Memoized, normalized list of NamespaceMapping.

    Order matters: consumers scan front to back, so framework mappings
    are tried before user mappings with the same namespace.
    """

    def __init__(self, workspace_root: str, *, exists: ExistsFn = fs_exists):
        self.workspace_root = workspace_root
        self._exists = exists
        self._environment: FrameworkEnvironment = EMPTY_ENVIRONMENT
        self._framework_root: Optional[str] = None
        self._user_mappings: List[NamespaceMapping] = []
        self._cache: Optional[List[NamespaceMapping]] = None

    @property
    def framework_root(self) -> Optional[str]:
        return self._framework_root

    @property
    def environment(self) -> FrameworkEnvironment:
        return self._environment

    def configure(
        self,
        environment: FrameworkEnvironment,
        framework_root: Optional[str] = None,
        user_mappings: Optional[Sequence[NamespaceMapping]] = None,
    ) -> None:
        self._environment = environment
        self._framework_root = framework_root or None
        self._user_mappings = list(user_mappings or [])
        self.invalidate()

    def invalidate(self) -> None:
        self._cache = None

    def effective(self) -> List[NamespaceMapping]:
        if self._cache is not None:
            return self._cache

        raw = [*self._environment.template_mappings, *self._user_mappings]
        self._cache = [
            NamespaceMapping(
                namespace=m.namespace,
                directory=normalize_directory(
                    m.directory,
                    self.workspace_root,
                    self._framework_root,
                    exists=self._exists,
                ),
            )
            for m in raw
        ]
        logger.debug(f"Rebuilt mapping table: {len(self._cache)} mappings")
        return self._cache

    def matching(self, reference: str) -> List[NamespaceMapping]:
        """Mappings whose namespace prefixes the reference, in scan order."""
        return [m for m in self.effective() if m.matches(reference)]


__all__ = ["MappingTable"]
