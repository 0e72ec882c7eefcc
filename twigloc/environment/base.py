"""
Framework environment contract.

An environment reports what the host framework knows about Twig: the
template namespaces and, for some frameworks, routes and the raw
introspection payload. Resolution only consumes `template_mappings`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from .types import NamespaceMapping


@runtime_checkable
class FrameworkEnvironment(Protocol):
    """What resolvers need from a framework environment."""

    @property
    def template_mappings(self) -> List[NamespaceMapping]:
        ...

    @property
    def routes(self) -> Dict[str, Any]:
        ...

    @property
    def environment(self) -> Optional[Dict[str, Any]]:
        ...


class StaticEnvironment:
    """
    Environment with a fixed list of mappings.

    Used for the "twig" (vanilla) framework option, for user-only
    configuration and in tests.
    """

    def __init__(
        self,
        mappings: Sequence[NamespaceMapping] = (),
        routes: Optional[Dict[str, Any]] = None,
        environment: Optional[Dict[str, Any]] = None,
    ):
        self._mappings = list(mappings)
        self._routes = dict(routes or {})
        self._environment = environment

    @property
    def template_mappings(self) -> List[NamespaceMapping]:
        return list(self._mappings)

    @property
    def routes(self) -> Dict[str, Any]:
        return self._routes

    @property
    def environment(self) -> Optional[Dict[str, Any]]:
        return self._environment

    def __repr__(self) -> str:
        return f"StaticEnvironment(mappings={len(self._mappings)})"


# Environment used until a framework has been introspected.
EMPTY_ENVIRONMENT = StaticEnvironment()


__all__ = ["FrameworkEnvironment", "StaticEnvironment", "EMPTY_ENVIRONMENT"]
