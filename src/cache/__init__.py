"""Include content and symbol model caches."""

from cache.content import ContentCache, ContentSource, FetchError
from cache.symbols import SymbolModelCache

__all__ = ["ContentCache", "ContentSource", "FetchError", "SymbolModelCache"]
