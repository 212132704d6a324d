"""Per-document cache of finished symbol models."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.declarations import SymbolModel
    from resolve.paths import DocumentContext

logger = logging.getLogger(__name__)


class SymbolModelCache:
    """Holds at most one finished model per document identity.

    A model is only stored once fully assembled, so readers see either the
    previous complete model or nothing.
    """

    def __init__(self) -> None:
        self._models: dict[str, SymbolModel] = {}

    def __contains__(self, document: object) -> bool:
        identity = getattr(document, "identity", None)
        return identity in self._models

    def get(self, document: DocumentContext) -> SymbolModel | None:
        return self._models.get(document.identity)

    def put(self, document: DocumentContext, model: SymbolModel) -> None:
        self._models[document.identity] = model

    def invalidate(self, document: DocumentContext) -> bool:
        """Drop the cached model for a document; True if one was cached."""
        removed = self._models.pop(document.identity, None)
        if removed is not None:
            logger.debug("Invalidated symbol model for %s", document.identity)
        return removed is not None

    def clear(self) -> None:
        self._models.clear()


__all__ = ["SymbolModelCache"]
