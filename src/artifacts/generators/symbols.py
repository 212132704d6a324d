"""Symbols artifact generator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from artifacts.models.symbols import SYMBOLS_JSONL, SymbolRecord
from artifacts.utils import _relative_output_dir, _write_jsonl
from cache.content import ContentCache
from parse.builder import build_symbol_model
from resolve.paths import DocumentContext
from scan.files import find_source_files
from scan.library import FileSystemContentSource
from settings.config import RpgleMapConfig
from utils import is_free_format

if TYPE_CHECKING:
    from pathlib import Path


class SymbolsGenerator:
    """Generates symbols.jsonl from the RPGLE sources under a root.

    Every source file is treated as a stream file at ``/<relative path>``, with
    the root directory standing in for the IFS root when includes are fetched.
    """

    def generate(
        self,
        root: Path,
        out_dir: Path,
        config: RpgleMapConfig | None = None,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate symbols artifact."""
        config = config or RpgleMapConfig()
        out_dir.mkdir(parents=True, exist_ok=True)

        content_cache = ContentCache(
            FileSystemContentSource(root), home_directory=config.home_directory
        )
        all_symbols: list[SymbolRecord] = []
        documents = 0

        for file_path in find_source_files(
            root, config, output_dir=_relative_output_dir(out_dir, root)
        ):
            text = file_path.read_text(encoding="utf-8", errors="replace")
            if not is_free_format(text):
                continue

            documents += 1
            document_path = "/" + file_path.relative_to(root).as_posix()
            document = DocumentContext(scheme="streamfile", path=document_path)
            model = build_symbol_model(document, text, content_cache)
            all_symbols.extend(
                SymbolRecord.from_declaration(document_path, declaration)
                for declaration in model.declarations()
            )

        all_symbols.sort(key=lambda s: (s.document, s.path, s.line, s.kind, s.name))

        _write_jsonl(out_dir / SYMBOLS_JSONL, all_symbols)

        symbol_dicts = [s.model_dump() for s in all_symbols]

        return symbol_dicts, {"document_count": documents}
