"""
Settings model.

Field names follow the editor configuration (camelCase, under the
`twiggy` section); snake_case names are accepted too.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..environment import NamespaceMapping, as_namespace


class FrameworkOption(str, Enum):
    IGNORE = "ignore"
    TWIG = "twig"
    SYMFONY = "symfony"
    CRAFT = "craft"


class TemplatePathConfig(BaseModel):
    """
    Manual namespace -> directory registration.

    `namespace` may be given with or without the leading "@";
    "" registers the root namespace.
    """
    model_config = ConfigDict(extra="forbid")

    namespace: str = ""
    path: str


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    framework: Optional[FrameworkOption] = None
    php_executable: str = Field(default="php", alias="phpExecutable")
    symfony_console_path: str = Field(default="./bin/console", alias="symfonyConsolePath")
    vanilla_twig_environment_path: str = Field(default="", alias="vanillaTwigEnvironmentPath")
    template_paths: List[TemplatePathConfig] = Field(default_factory=list, alias="templatePaths")


def to_mappings(configs: Optional[List[TemplatePathConfig]]) -> List[NamespaceMapping]:
    """User-configured template paths as NamespaceMapping, in declared order."""
    if not configs:
        return []
    return [
        NamespaceMapping(namespace=as_namespace(cfg.namespace), directory=cfg.path)
        for cfg in configs
    ]


__all__ = ["FrameworkOption", "TemplatePathConfig", "Settings", "to_mappings"]
