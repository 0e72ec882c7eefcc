from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Tuple

from .config import Settings, load_settings
from .configuration import ConfigurationManager
from .documents import DocumentCache, collect_imports
from .errors import DocumentUnavailableError, FrameworkNotDetectedError, TwigLocUserError
from .jsonic import dumps as jdumps
from .report_schema import DiagReport, ImportEntry, ImportsReport, MappingEntry, MappingsReport, ResolveReport
from .template import Position
from .version import tool_version

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="twigloc",
        description="Twig template path resolution",
        add_help=True,
    )
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--root", default=None, help="workspace root (default: current directory)")
        sp.add_argument("--settings", default=None, help="settings file (default: <root>/twigloc.yaml)")

    sp_mappings = sub.add_parser("mappings", help="effective namespace mappings (JSON)")
    add_common(sp_mappings)

    sp_resolve = sub.add_parser("resolve", help="resolve a template reference (JSON)")
    sp_resolve.add_argument("reference", help="template reference, e.g. @Bundle/base.html.twig")
    add_common(sp_resolve)

    sp_imports = sub.add_parser("imports", help="import aliases visible in a template (JSON)")
    sp_imports.add_argument("file", help="template file")
    sp_imports.add_argument("--line", type=int, default=None, help="zero-based line of the position")
    sp_imports.add_argument("--character", type=int, default=0, help="zero-based character of the position")
    add_common(sp_imports)

    sp_diag = sub.add_parser("diag", help="settings and environment diagnostics (JSON)")
    sp_diag.add_argument("--require-framework", action="store_true", help="fail when no framework is detected")
    add_common(sp_diag)

    return p


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or os.environ.get("TWIGLOC_DEBUG") else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s", stream=sys.stderr)


def _workspace(ns: argparse.Namespace) -> Path:
    return Path(ns.root).resolve() if ns.root else Path.cwd()


def _configured_cache(ns: argparse.Namespace) -> Tuple[DocumentCache, ConfigurationManager, Settings]:
    root = _workspace(ns)
    settings = load_settings(root, Path(ns.settings) if ns.settings else None)
    cache = DocumentCache(str(root))
    manager = ConfigurationManager(cache, root)
    manager.apply(settings)
    return cache, manager, settings


def _cmd_mappings(ns: argparse.Namespace) -> MappingsReport:
    cache, _, _ = _configured_cache(ns)
    return MappingsReport(mappings=[MappingEntry(**m.to_dict()) for m in cache.effective_mappings()])


def _cmd_resolve(ns: argparse.Namespace) -> ResolveReport:
    cache, _, _ = _configured_cache(ns)
    try:
        document = cache.resolve_by_namespaced_path(ns.reference)
    except OSError as e:
        raise DocumentUnavailableError(e.filename or ns.reference, e) from e
    return ResolveReport(reference=ns.reference, path=document.path if document else None)


def _cmd_imports(ns: argparse.Namespace) -> ImportsReport:
    cache, _, _ = _configured_cache(ns)
    file = str(Path(ns.file).resolve())
    try:
        document = cache.get(file)
    except OSError as e:
        raise DocumentUnavailableError(file, e) from e
    position: Optional[Position] = None
    if ns.line is not None:
        position = Position(ns.line, ns.character)

    items: list[ImportEntry] = []
    seen = set()
    for imp in collect_imports(document, position):
        if imp.name in seen:
            continue
        seen.add(imp.name)
        try:
            target = cache.resolve_import(document, imp.name, position)
        except OSError as e:
            logger.warning(f"Cannot read template imported as {imp.name!r}: {e}")
            target = None
        items.append(ImportEntry(
            name=imp.name,
            path=imp.path,
            resolved=target.path if target else None,
        ))
    return ImportsReport(file=document.path, imports=items)


def _cmd_diag(ns: argparse.Namespace) -> DiagReport:
    cache, manager, settings = _configured_cache(ns)
    if ns.require_framework and manager.framework is None:
        raise FrameworkNotDetectedError(str(_workspace(ns)))
    return DiagReport(
        version=tool_version(),
        workspace=cache.workspace_root,
        framework=manager.framework.value if manager.framework else None,
        framework_root=manager.framework_root,
        mappings=len(cache.effective_mappings()),
        settings=settings,
    )


_COMMANDS = {
    "mappings": _cmd_mappings,
    "resolve": _cmd_resolve,
    "imports": _cmd_imports,
    "diag": _cmd_diag,
}


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose)

    try:
        result = _COMMANDS[ns.cmd](ns)
    except TwigLocUserError as e:
        sys.stderr.write(f"Error: {e}\n")
        return 2

    sys.stdout.write(jdumps(result))
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
