import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .analysis.layout import build_layout_registry, emit_layout
from .analysis.layout_emit import render_registry_dump
from .analysis.layout_errors import LayoutConfigError, LayoutError
from .log import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="structlayout",
        description="Print the layout of C/C++ records and everything they depend on, dependencies first.",
    )
    parser.add_argument("path", nargs="?", default=None, help="C/C++ source or header file to parse.")
    parser.add_argument(
        "names",
        nargs="*",
        help="Record tag or typedef names to extract (exact match, at least one).",
    )
    parser.add_argument(
        "--clang-arg",
        dest="clang_args",
        action="append",
        default=[],
        help="Extra argument passed to the clang parser (repeatable, e.g. --clang-arg=-Iinclude).",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the layout to this path instead of stdout.",
    )
    return parser


def run(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    if args.path is None:
        raise LayoutConfigError("need a source file argument")
    if not args.names:
        raise LayoutConfigError("need a name filter")

    registry = build_layout_registry(args.path, args.names, clang_args=args.clang_args)

    print(render_registry_dump(registry), file=sys.stderr)

    output = emit_layout(registry)
    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
    else:
        print(output, end="")


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    try:
        run(argv)
    except LayoutError as exc:
        print(f"structlayout: error: {exc}", file=sys.stderr)
        return exc.exit_code
    return 0


if __name__ == "__main__":
    sys.exit(main())
