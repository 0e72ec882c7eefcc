"""
Data types shared by framework environments and resolvers.
"""

from __future__ import annotations

from dataclasses import dataclass

# Namespace sentinel: "@Bundle" style namespaces; "" is the default namespace.
NAMESPACE_PREFIX = "@"
ROOT_NAMESPACE = ""


@dataclass(frozen=True)
class NamespaceMapping:
    """
    One namespace -> directory association.

    Namespaces are not unique inside a mapping table: entries are scanned
    in order and the first one that resolves wins.
    """
    namespace: str
    directory: str

    def matches(self, reference: str) -> bool:
        """True if this mapping's namespace is a prefix of the reference."""
        return reference.startswith(self.namespace)

    def to_dict(self) -> dict:
        return {"namespace": self.namespace, "directory": self.directory}


def as_namespace(name: str) -> str:
    """
    Canonical namespace spelling: "" stays root, "Bundle" becomes "@Bundle".
    """
    if name == ROOT_NAMESPACE or name.startswith(NAMESPACE_PREFIX):
        return name
    return f"{NAMESPACE_PREFIX}{name}"


__all__ = ["NAMESPACE_PREFIX", "ROOT_NAMESPACE", "NamespaceMapping", "as_namespace"]
