"""
Tests for twigloc/documents/cache.py: loading, reloading and eviction.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from twigloc.documents import Document, DocumentCache
from twigloc.environment import EMPTY_ENVIRONMENT
from twigloc.template import TwigParser
from twigloc.uri import to_document_uri
from tests.infrastructure import write


class CountingParser:
    def __init__(self):
        self.calls = 0
        self._inner = TwigParser()

    def parse(self, text):
        self.calls += 1
        return self._inner.parse(text)


class StubTypeResolver:
    def resolve_type(self, type_name):
        return {"class": type_name.lstrip("\\")}


class TestGet:

    def test_loads_from_disk(self, cache: DocumentCache, twig_project: Path):
        path = twig_project / "templates" / "partials" / "header.twig"
        doc = cache.get(str(path))

        assert doc.text == "<header></header>\n"
        assert doc.tree is not None
        assert doc.path == str(path)
        assert to_document_uri(str(path)) in cache

    def test_collects_locals(self, cache: DocumentCache, twig_project: Path):
        doc = cache.get(str(twig_project / "templates" / "base.html.twig"))

        assert [imp.name for imp in doc.locals.imports] == ["forms"]
        assert doc.locals.imports[0].path == "macros.twig"
        assert [b.name for b in doc.locals.blocks] == ["body"]

    def test_uri_and_path_share_one_entry(self, cache: DocumentCache, twig_project: Path):
        path = twig_project / "templates" / "partials" / "header.twig"
        by_path = cache.get(str(path))
        by_uri = cache.get(path.as_uri())

        assert by_path is by_uri
        assert len(cache) == 1

    def test_cached_document_not_reread(self, twig_project: Path):
        reads = []

        def read_text(path):
            reads.append(path)
            return Path(path).read_text(encoding="utf-8")

        cache = DocumentCache(str(twig_project), read_text=read_text)
        path = str(twig_project / "templates" / "partials" / "header.twig")
        cache.get(path)
        cache.get(path)

        assert len(reads) == 1

    def test_explicit_text_then_get_returns_same_instance(self, cache: DocumentCache, twig_project: Path):
        path = str(twig_project / "templates" / "partials" / "header.twig")

        first = cache.get(path, "{% block edited %}{% endblock %}")
        second = cache.get(path)

        assert second is first
        assert second.text == "{% block edited %}{% endblock %}"
        assert [b.name for b in second.locals.blocks] == ["edited"]

    def test_explicit_text_reloads_existing(self, cache: DocumentCache, twig_project: Path):
        path = str(twig_project / "templates" / "partials" / "header.twig")
        doc = cache.get(path)
        old_tree = doc.tree

        again = cache.get(path, "{% set a = 1 %}")

        assert again is doc
        assert doc.text == "{% set a = 1 %}"
        assert doc.tree is not old_tree
        assert [v.name for v in doc.locals.variables] == ["a"]

    def test_text_for_file_not_on_disk(self, cache: DocumentCache, twig_project: Path):
        path = str(twig_project / "templates" / "unsaved.twig")
        doc = cache.get(path, "hello")
        assert doc.text == "hello"

    def test_missing_file_raises_and_is_not_cached(self, cache: DocumentCache, twig_project: Path):
        path = str(twig_project / "templates" / "nope.twig")
        with pytest.raises(FileNotFoundError):
            cache.get(path)
        assert path not in cache

    def test_update_text_always_reloads(self, twig_project: Path):
        parser = CountingParser()
        cache = DocumentCache(str(twig_project), parser=parser)
        path = str(twig_project / "templates" / "partials" / "header.twig")

        doc = cache.update_text(path, "one")
        cache.update_text(path, "two")

        assert doc.text == "two"
        assert parser.calls == 2

    def test_documents_view_is_read_only(self, cache: DocumentCache, twig_project: Path):
        cache.get(str(twig_project / "templates" / "partials" / "header.twig"))
        with pytest.raises(TypeError):
            cache.documents["x"] = None  # type: ignore[index]


class TestSetText:

    def test_replaces_tree_and_locals_together(self, cache: DocumentCache, twig_project: Path):
        doc = Document(str(twig_project / "templates" / "x.twig"))
        cache.set_text(doc, "{% import 'a.twig' as a %}")
        assert [i.name for i in doc.locals.imports] == ["a"]

        cache.set_text(doc, "{% import 'b.twig' as b %}")
        assert doc.text == "{% import 'b.twig' as b %}"
        assert [i.name for i in doc.locals.imports] == ["b"]
        assert doc.tree.root.body[0].args == "'b.twig' as b"

    def test_reads_from_uri_without_text(self, cache: DocumentCache, twig_project: Path):
        doc = Document((twig_project / "vendor" / "acme" / "views" / "widget.twig").as_uri())
        cache.set_text(doc)
        assert doc.text == "widget\n"

    def test_failed_read_keeps_previous_state(self, cache: DocumentCache, twig_project: Path):
        path = twig_project / "templates" / "temp.twig"
        write(path, "{% set kept = 1 %}")
        doc = cache.get(str(path))
        tree = doc.tree

        path.unlink()
        with pytest.raises(FileNotFoundError):
            cache.set_text(doc)

        assert doc.text == "{% set kept = 1 %}"
        assert doc.tree is tree
        assert [v.name for v in doc.locals.variables] == ["kept"]

    def test_type_resolver_used_when_configured(self, cache: DocumentCache, twig_project: Path):
        cache.configure(EMPTY_ENVIRONMENT, StubTypeResolver())
        doc = cache.get(str(twig_project / "templates" / "t.twig"), "{# @var user \\App\\User #}")

        (var,) = doc.locals.variables
        assert var.name == "user"
        assert var.type == "\\App\\User"
        assert var.type_info == {"class": "App\\User"}

    def test_without_type_resolver_keeps_raw_type(self, cache: DocumentCache, twig_project: Path):
        doc = cache.get(str(twig_project / "templates" / "t.twig"), "{# @var user \\App\\User #}")
        (var,) = doc.locals.variables
        assert var.type == "\\App\\User"
        assert var.type_info is None


class TestRemoveAndRefresh:

    def test_remove_then_get_gives_fresh_document(self, cache: DocumentCache, twig_project: Path):
        path = str(twig_project / "templates" / "partials" / "header.twig")
        first = cache.get(path, "edited in editor")

        cache.remove(path)
        second = cache.get(path)

        assert second is not first
        assert second.text == "<header></header>\n"

    def test_remove_is_idempotent(self, cache: DocumentCache, twig_project: Path):
        path = str(twig_project / "templates" / "partials" / "header.twig")
        cache.remove(path)
        cache.get(path)
        cache.remove(path)
        cache.remove(path)
        assert len(cache) == 0

    def test_refresh_rereads_disk(self, cache: DocumentCache, twig_project: Path):
        path = twig_project / "templates" / "partials" / "header.twig"
        doc = cache.get(str(path), "unsaved buffer")

        write(path, "{% block saved %}{% endblock %}")
        cache.refresh(path.as_uri())

        assert doc.text == "{% block saved %}{% endblock %}"
        assert [b.name for b in doc.locals.blocks] == ["saved"]

    def test_refresh_unknown_is_noop(self, cache: DocumentCache, twig_project: Path):
        path = str(twig_project / "templates" / "never-loaded.twig")
        cache.refresh(path)
        assert len(cache) == 0

    def test_refresh_deleted_file_raises(self, cache: DocumentCache, twig_project: Path):
        path = twig_project / "templates" / "gone.twig"
        write(path, "x")
        cache.get(str(path))
        path.unlink()

        with pytest.raises(OSError):
            cache.refresh(str(path))


class TestWorkspaceRoot:

    def test_accepts_uri(self, twig_project: Path):
        cache = DocumentCache(twig_project.as_uri())
        assert cache.workspace_root == str(twig_project)
