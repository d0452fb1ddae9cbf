from __future__ import annotations

import logging
import os
import shlex
from pathlib import Path
from typing import Iterable, Optional, Sequence

from clang.cindex import Config, Diagnostic, Index, LibclangError, TranslationUnitLoadError

from .layout_builder import build_registry
from .layout_emit import render_layout
from .layout_errors import EngineError, LayoutConfigError
from .layout_sort import ordered_closure
from .layout_types import LayoutRegistry


LIBCLANG_ENV = "STRUCTLAYOUT_LIBCLANG"
CLANG_ARGS_ENV = "STRUCTLAYOUT_CLANG_ARGS"

log = logging.getLogger(__name__)


def configure_libclang(library_file: Optional[str] = None) -> None:
    library_file = library_file or os.environ.get(LIBCLANG_ENV)
    if not library_file or Config.loaded:
        return
    if not Path(library_file).is_file():
        raise LayoutConfigError(f"libclang library not found: {library_file}")
    Config.set_library_file(library_file)


def clang_args_from_env() -> list[str]:
    return shlex.split(os.environ.get(CLANG_ARGS_ENV, ""))


def _location(diag) -> str:
    loc = diag.location
    if loc.file is None:
        return "<unknown>"
    return f"{loc.file.name}:{loc.line}:{loc.column}"


def parse_translation_unit(filename: str, clang_args: Sequence[str] = ()):
    path = Path(filename)
    if not path.is_file():
        raise LayoutConfigError(f"source file not found: {filename}")
    configure_libclang()
    args = clang_args_from_env() + list(clang_args)
    try:
        index = Index.create()
        tu = index.parse(str(path), args=args)
    except LibclangError as exc:
        raise EngineError(f"failed to load libclang: {exc}") from exc
    except TranslationUnitLoadError as exc:
        raise EngineError(f"failed to parse {filename}: {exc}") from exc
    for diag in tu.diagnostics:
        if diag.severity >= Diagnostic.Error:
            log.warning("%s: %s", _location(diag), diag.spelling)
    return tu


def build_layout_registry(
    filename: str,
    name_filters: Iterable[str],
    clang_args: Sequence[str] = (),
) -> LayoutRegistry:
    name_filters = set(name_filters)
    if not name_filters:
        raise LayoutConfigError("need at least one name filter")
    log.info("%s", filename)
    log.info("filters: %s", ", ".join(sorted(name_filters)))
    tu = parse_translation_unit(filename, clang_args)
    return build_registry(tu.cursor, name_filters)


def emit_layout(registry: LayoutRegistry) -> str:
    return render_layout(registry, ordered_closure(registry))


def extract_layout(filename: str, name_filters: Iterable[str], clang_args: Sequence[str] = ()) -> str:
    registry = build_layout_registry(filename, name_filters, clang_args)
    return emit_layout(registry)
