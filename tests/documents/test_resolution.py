"""
Tests for namespaced path resolution in DocumentCache.
"""

from __future__ import annotations

from pathlib import Path

from twigloc.documents import DocumentCache
from twigloc.environment import NamespaceMapping, StaticEnvironment
from tests.infrastructure import write


def _cache(root: Path, *mappings, framework_root=None, **kwargs) -> DocumentCache:
    cache = DocumentCache(str(root), **kwargs)
    cache.configure(
        StaticEnvironment([NamespaceMapping(ns, d) for ns, d in mappings]),
        framework_root=framework_root,
    )
    return cache


class TestRootNamespace:

    def test_plain_reference(self, cache: DocumentCache, twig_project: Path):
        doc = cache.resolve_by_namespaced_path("partials/header.twig")
        assert doc is not None
        assert doc.path == str(twig_project / "templates" / "partials" / "header.twig")
        assert doc.text == "<header></header>\n"

    def test_twig_suffix_is_tried(self, cache: DocumentCache, twig_project: Path):
        doc = cache.resolve_by_namespaced_path("base.html")
        assert doc is not None
        assert doc.path == str(twig_project / "templates" / "base.html.twig")

    def test_unresolved_returns_none(self, cache: DocumentCache):
        assert cache.resolve_by_namespaced_path("missing.twig") is None
        assert cache.resolve_by_namespaced_path("@Unknown/x.twig") is None
        assert len(cache) == 0

    def test_non_utf8_template_still_loads(self, cache: DocumentCache, twig_project: Path):
        (twig_project / "templates" / "legacy.twig").write_bytes(b"caf\xe9 {{ x }}")

        doc = cache.resolve_by_namespaced_path("legacy.twig")

        assert doc is not None
        assert doc.text == "caf\ufffd {{ x }}"
        assert doc.tree is not None and doc.tree.errors == []


class TestNamedNamespace:

    def test_namespace_is_replaced(self, cache: DocumentCache, twig_project: Path):
        doc = cache.resolve_by_namespaced_path("@Bundle/layout.twig")
        assert doc is not None
        assert doc.path == str(twig_project / "src" / "Bundle" / "views" / "layout.twig")

    def test_resolved_document_is_cached(self, cache: DocumentCache):
        first = cache.resolve_by_namespaced_path("@Bundle/layout.twig")
        second = cache.resolve_by_namespaced_path("@Bundle/layout.twig")
        assert first is second
        assert first.uri in cache

    def test_absolute_directory_outside_workspace(self, tmp_path: Path, twig_project: Path):
        write(tmp_path / "shared" / "views" / "card.twig", "card\n")
        cache = _cache(twig_project, ("@Shared", str(tmp_path / "shared" / "views")))

        doc = cache.resolve_by_namespaced_path("@Shared/card.twig")
        assert doc is not None
        assert doc.path == str(tmp_path / "shared" / "views" / "card.twig")


class TestPrecedence:

    def test_same_namespace_falls_through_to_next_mapping(self, twig_project: Path):
        cache = _cache(
            twig_project,
            ("@Acme", "src/Bundle/views"),
            ("@Acme", "vendor/acme/views"),
        )
        doc = cache.resolve_by_namespaced_path("@Acme/widget.twig")
        assert doc is not None
        assert doc.path == str(twig_project / "vendor" / "acme" / "views" / "widget.twig")

    def test_first_mapping_wins_when_both_resolve(self, twig_project: Path):
        write(twig_project / "src" / "Bundle" / "views" / "widget.twig", "override\n")
        cache = _cache(
            twig_project,
            ("@Acme", "src/Bundle/views"),
            ("@Acme", "vendor/acme/views"),
        )
        doc = cache.resolve_by_namespaced_path("@Acme/widget.twig")
        assert doc.text == "override\n"

    def test_framework_mappings_before_user_mappings(self, twig_project: Path):
        cache = DocumentCache(str(twig_project))
        cache.configure(
            StaticEnvironment([NamespaceMapping("@Acme", "vendor/acme/views")]),
            user_mappings=[NamespaceMapping("@Acme", "src/Bundle/views")],
        )
        write(twig_project / "src" / "Bundle" / "views" / "widget.twig", "user\n")

        doc = cache.resolve_by_namespaced_path("@Acme/widget.twig")
        assert doc.text == "widget\n"


class TestCacheHits:

    def test_cached_document_returned_without_disk_lookup(self, twig_project: Path):
        lookups = []

        def is_file(path):
            lookups.append(path)
            return Path(path).is_file()

        cache = _cache(twig_project, ("", "templates"), is_file=is_file)
        loaded = cache.get(str(twig_project / "templates" / "macros.twig"))

        assert cache.resolve_by_namespaced_path("macros.twig") is loaded
        assert lookups == []

    def test_unsaved_buffer_wins_over_disk(self, cache: DocumentCache, twig_project: Path):
        path = str(twig_project / "templates" / "macros.twig")
        cache.get(path, "{% macro edited() %}{% endmacro %}")

        doc = cache.resolve_by_namespaced_path("macros.twig")
        assert [m.name for m in doc.locals.macros] == ["edited"]


class TestFrameworkRoot:

    def test_retry_under_framework_root(self, app_project: Path):
        # templates/ exists at the workspace root, but the file lives under app/
        (app_project / "templates").mkdir()
        cache = _cache(app_project, ("", "templates"), framework_root="app")

        doc = cache.resolve_by_namespaced_path("page.twig")
        assert doc is not None
        assert doc.path == str(app_project / "app" / "templates" / "page.twig")

    def test_directory_normalized_against_framework_root(self, app_project: Path):
        cache = _cache(app_project, ("", "templates"), framework_root="app")

        assert cache.effective_mappings() == [NamespaceMapping("", "app/templates")]
        doc = cache.resolve_by_namespaced_path("shared/nav")
        assert doc is not None
        assert doc.text == "nav\n"

    def test_without_framework_root_nothing_found(self, app_project: Path):
        cache = _cache(app_project, ("", "templates"))
        assert cache.resolve_by_namespaced_path("page.twig") is None
