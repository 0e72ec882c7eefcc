"""
Framework environments: where template namespaces come from.
"""

from .types import NAMESPACE_PREFIX, ROOT_NAMESPACE, NamespaceMapping, as_namespace
from .base import FrameworkEnvironment, StaticEnvironment, EMPTY_ENVIRONMENT
from .console import CommandRunner, PhpConsole, run_command
from .symfony import SymfonyEnvironment, parse_loader_paths

__all__ = [
    "NAMESPACE_PREFIX",
    "ROOT_NAMESPACE",
    "NamespaceMapping",
    "as_namespace",
    "FrameworkEnvironment",
    "StaticEnvironment",
    "EMPTY_ENVIRONMENT",
    "CommandRunner",
    "PhpConsole",
    "run_command",
    "SymfonyEnvironment",
    "parse_loader_paths",
]
