"""
Symfony environment: template namespaces from `bin/console debug:twig`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .console import PhpConsole
from .types import NamespaceMapping, ROOT_NAMESPACE

logger = logging.getLogger(__name__)

# Key Symfony uses in `loader_paths` for the default namespace
SYMFONY_ROOT_KEY = "(None)"


def parse_loader_paths(payload: Dict[str, Any]) -> List[NamespaceMapping]:
    """
    Mappings from the `loader_paths` section of `debug:twig --format json`.

    Each directory of a namespace becomes its own mapping, in reported order.
    """
    loader_paths = payload.get("loader_paths") or {}
    if not isinstance(loader_paths, dict):
        return []

    mappings: List[NamespaceMapping] = []
    for namespace, directories in loader_paths.items():
        if namespace == SYMFONY_ROOT_KEY:
            namespace = ROOT_NAMESPACE
        if isinstance(directories, str):
            directories = [directories]
        for directory in directories or []:
            mappings.append(NamespaceMapping(namespace=namespace, directory=str(directory)))
    return mappings


class SymfonyEnvironment:
    """
    Environment introspected from a Symfony application.

    Stays empty until `refresh()` succeeds; failures are logged, never raised.
    """

    def __init__(self, console: PhpConsole):
        self._console = console
        self._environment: Optional[Dict[str, Any]] = None
        self._routes: Dict[str, Any] = {}
        self._mappings: List[NamespaceMapping] = []

    @property
    def template_mappings(self) -> List[NamespaceMapping]:
        return list(self._mappings)

    @property
    def routes(self) -> Dict[str, Any]:
        return self._routes

    @property
    def environment(self) -> Optional[Dict[str, Any]]:
        return self._environment

    def refresh(self, console_path: str) -> None:
        twig = self._console.run_json(console_path, "debug:twig", "--format", "json")
        if twig is None:
            logger.warning("Failed to load Twig environment.")
            self._environment = None
            self._mappings = []
        else:
            self._environment = twig
            self._mappings = parse_loader_paths(twig)
            logger.info(f"Loaded Twig environment: {len(self._mappings)} template mappings")

        router = self._console.run_json(console_path, "debug:router", "--format", "json")
        self._routes = router or {}

    def __repr__(self) -> str:
        return f"SymfonyEnvironment(mappings={len(self._mappings)}, routes={len(self._routes)})"


__all__ = ["SYMFONY_ROOT_KEY", "parse_loader_paths", "SymfonyEnvironment"]
