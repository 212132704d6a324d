"""Symbol model construction for a document and its includes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from parse.declarations import assemble
from parse.includes import discover_includes
from utils import split_lines

if TYPE_CHECKING:
    from cache.content import ContentCache
    from models.declarations import SymbolModel
    from resolve.paths import DocumentContext

logger = logging.getLogger(__name__)


def build_symbol_model(
    document: DocumentContext,
    text: str,
    content_cache: ContentCache,
) -> SymbolModel:
    """Build the symbol model for a document.

    Args:
        document: The editing document.
        text: Full current text of the document.
        content_cache: Cache used to fetch include targets.

    Returns:
        A finished, immutable SymbolModel.
    """
    files = discover_includes(document, split_lines(text), content_cache)

    model = assemble(files)
    logger.debug(
        "Built symbol model for %s from %d file(s): %d declaration(s)",
        document.identity,
        len(files),
        model.declaration_count,
    )
    return model


__all__ = ["build_symbol_model"]
