"""Command-line interface for rpglemap."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from artifacts.utils import _dump_json
from artifacts.write import generate_all_artifacts
from resolve.paths import (
    DocumentContext,
    UnresolvableIncludeError,
    resolve_include_target,
)
from scan.library import FileSystemContentSource
from settings.config import ConfigError, load_config
from workspace.session import Workspace


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Source root (default: .)",
    )


def _add_document_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--scheme",
        choices=["streamfile", "member"],
        default="streamfile",
        help="Addressing scheme of the document (default: streamfile)",
    )
    parser.add_argument(
        "--home-dir",
        default=None,
        help="Home directory for relative stream file includes (default: config)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rpglemap")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate", help="Write symbols.jsonl for every source under a root"
    )
    _add_common_paths(generate_parser)
    generate_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for generated artifacts (default: config output dir)",
    )

    symbols_parser = subparsers.add_parser(
        "symbols", help="Print the symbol model of one document as JSON"
    )
    symbols_parser.add_argument("file", help="Source file to read")
    symbols_parser.add_argument(
        "--root",
        default=".",
        help="Directory standing in for the IFS root / library tree (default: .)",
    )
    symbols_parser.add_argument(
        "--path",
        default=None,
        help="Document path as addressed on the host (default: relative to root)",
    )
    _add_document_options(symbols_parser)

    resolve_parser = subparsers.add_parser(
        "resolve", help="Resolve an include target against a document"
    )
    resolve_parser.add_argument("document", help="Path of the including document")
    resolve_parser.add_argument("target", help="Target as written on /COPY")
    _add_document_options(resolve_parser)

    return parser


def _resolve_output_dir(out_dir: str | None) -> Path | None:
    if out_dir is None:
        return None
    return Path(out_dir).expanduser().resolve()


def _document_path(file_path: Path, root: Path, explicit: str | None) -> str:
    if explicit:
        return explicit
    try:
        return "/" + file_path.relative_to(root).as_posix()
    except ValueError:
        return file_path.as_posix()


def _handle_generate(root: Path, out_dir: str | None) -> int:
    try:
        generate_all_artifacts(root=root, out_dir=_resolve_output_dir(out_dir))
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    return 0


def _handle_symbols(args: argparse.Namespace) -> int:
    root = Path(args.root).expanduser().resolve()
    file_path = Path(args.file).expanduser().resolve()
    try:
        config = load_config(root)
        text = file_path.read_text(encoding="utf-8", errors="replace")
    except (ConfigError, OSError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    if args.home_dir:
        config = config.model_copy(update={"home_directory": args.home_dir})

    workspace = Workspace(FileSystemContentSource(root), config=config)
    document = DocumentContext(
        scheme=args.scheme, path=_document_path(file_path, root, args.path)
    )
    model = workspace.get_symbol_model(document, text)
    sys.stdout.buffer.write(_dump_json(model))
    sys.stdout.buffer.write(b"\n")
    return 0


def _handle_resolve(args: argparse.Namespace) -> int:
    home_dir = args.home_dir
    if home_dir is None:
        try:
            home_dir = load_config(Path.cwd()).home_directory
        except ConfigError as exc:
            sys.stderr.write(f"error: {exc}\n")
            return 2

    document = DocumentContext(scheme=args.scheme, path=args.document)
    try:
        resolved = resolve_include_target(
            document, args.target, home_directory=home_dir
        )
    except UnresolvableIncludeError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    sys.stdout.write(f"{resolved.canonical_path} ({resolved.kind})\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.command == "generate":
        root = Path(args.root).expanduser().resolve()
        return _handle_generate(root, args.out_dir)

    if args.command == "symbols":
        return _handle_symbols(args)

    if args.command == "resolve":
        return _handle_resolve(args)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
