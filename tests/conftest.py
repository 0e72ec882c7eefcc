from pathlib import Path

import pytest

from tests.infrastructure import write, write_template


@pytest.fixture
def twig_project(tmp_path: Path) -> Path:
    """
    Minimal Symfony-like workspace.

    Structure:
        root/
        ├── templates/
        │   ├── base.html.twig
        │   ├── macros.twig
        │   └── partials/
        │       └── header.twig
        ├── src/Bundle/views/
        │   └── layout.twig
        └── vendor/acme/views/
            └── widget.twig
    """
    root = tmp_path / "ws"
    write_template(root / "templates" / "base.html.twig", """
        {% import 'macros.twig' as forms %}
        <html>{% block body %}{% endblock %}</html>
    """)
    write_template(root / "templates" / "macros.twig", """
        {% macro input(name, value) %}<input name="{{ name }}">{% endmacro %}
    """)
    write(root / "templates" / "partials" / "header.twig", "<header></header>\n")
    write(root / "src" / "Bundle" / "views" / "layout.twig", "{% extends 'base.html.twig' %}\n")
    write(root / "vendor" / "acme" / "views" / "widget.twig", "widget\n")
    return root


@pytest.fixture
def app_project(tmp_path: Path) -> Path:
    """
    Workspace whose framework lives in app/ (console at app/bin/console).
    """
    root = tmp_path / "ws"
    write(root / "app" / "bin" / "console", "#!/usr/bin/env php\n")
    write(root / "app" / "templates" / "page.twig", "page\n")
    write(root / "app" / "templates" / "shared" / "nav.twig", "nav\n")
    return root

