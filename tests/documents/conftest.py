"""
Fixtures for document cache tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from twigloc.documents import DocumentCache
from twigloc.environment import NamespaceMapping, StaticEnvironment


@pytest.fixture
def symfony_env() -> StaticEnvironment:
    return StaticEnvironment([
        NamespaceMapping("", "templates"),
        NamespaceMapping("@Bundle", "src/Bundle/views"),
    ])


@pytest.fixture
def cache(twig_project: Path, symfony_env: StaticEnvironment) -> DocumentCache:
    c = DocumentCache(str(twig_project))
    c.configure(symfony_env)
    return c
