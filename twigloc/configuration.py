"""
Applying settings to a DocumentCache.

Mirrors what an editor does on a configuration change: user mappings
take effect immediately, then the framework is introspected and the
cache is reconfigured with the richer environment.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import FrameworkOption, Settings, guess_framework, to_mappings
from .documents import DocumentCache
from .environment import (
    EMPTY_ENVIRONMENT,
    CommandRunner,
    FrameworkEnvironment,
    NamespaceMapping,
    PhpConsole,
    StaticEnvironment,
    SymfonyEnvironment,
)
from .paths import extract_framework_root

logger = logging.getLogger(__name__)

# Craft CMS serves site templates from <project>/templates
CRAFT_TEMPLATES_DIR = "templates"


class ConfigurationManager:
    """Coordinates settings, framework environment and the document cache."""

    def __init__(self, cache: DocumentCache, workspace_root: Path, *, runner: Optional[CommandRunner] = None):
        self.cache = cache
        self.workspace_root = Path(workspace_root)
        self._runner = runner
        self.framework: Optional[FrameworkOption] = None
        self.framework_root: Optional[str] = None

    def apply(self, settings: Settings) -> FrameworkEnvironment:
        """
        Configure the cache from settings.

        Returns:
            The environment the cache ends up configured with
        """
        user_mappings = to_mappings(settings.template_paths)

        self.framework = None
        self.framework_root = None
        self.cache.configure(EMPTY_ENVIRONMENT, None, None, user_mappings)

        if settings.framework == FrameworkOption.IGNORE:
            return EMPTY_ENVIRONMENT

        framework = settings.framework
        if framework is None:
            framework = guess_framework(self.workspace_root)
            if framework is None:
                logger.warning("`twiggy.framework` is required.")
                return EMPTY_ENVIRONMENT
            logger.info(f"Guessed `twiggy.framework`: {framework.value}")

        framework_root = extract_framework_root(settings.symfony_console_path)
        if framework_root:
            logger.info(f"Detected framework root: {framework_root}")

        environment = self._build_environment(framework, settings)

        self.framework = framework
        self.framework_root = framework_root
        self.cache.configure(environment, None, framework_root, user_mappings)
        return environment

    def _build_environment(self, framework: FrameworkOption, settings: Settings) -> FrameworkEnvironment:
        if framework == FrameworkOption.SYMFONY:
            console = PhpConsole(settings.php_executable, str(self.workspace_root), runner=self._runner)
            environment = SymfonyEnvironment(console)
            environment.refresh(settings.symfony_console_path)
            return environment
        if framework == FrameworkOption.CRAFT:
            return StaticEnvironment([NamespaceMapping("", CRAFT_TEMPLATES_DIR)])
        return StaticEnvironment()


__all__ = ["CRAFT_TEMPLATES_DIR", "ConfigurationManager"]
