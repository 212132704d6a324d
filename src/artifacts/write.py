from __future__ import annotations

from typing import TYPE_CHECKING

from artifacts.generators import SymbolsGenerator
from artifacts.models.symbols import SYMBOLS_JSONL
from settings.config import load_config, resolve_output_dir

if TYPE_CHECKING:
    from pathlib import Path

    from settings.config import RpgleMapConfig


def generate_all_artifacts(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: RpgleMapConfig | None = None,
) -> dict[str, object]:
    """Generate symbol artifacts for a source tree.

    Args:
        root: Root directory holding the RPGLE sources
        out_dir: Optional output directory for generated artifacts
        config: Optional configuration (loaded from root when omitted)

    Returns:
        Dictionary with counts and list of generated artifact paths.
    """
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    symbol_dicts, summary = SymbolsGenerator().generate(root, out_dir, config)

    return {
        "document_count": summary["document_count"],
        "symbol_count": len(symbol_dicts),
        "artifacts": [str(out_dir / SYMBOLS_JSONL)],
    }
