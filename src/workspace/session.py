"""Document lifecycle: the entry point used by editor integrations.

A ``Workspace`` owns the include content cache and the symbol model cache and
reacts to open, change and save notifications. Consumers (hover, completion,
outline, definition, the linter) only ever read finished models from it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import orjson

from cache.content import ContentCache
from cache.symbols import SymbolModelCache
from parse.builder import build_symbol_model
from parse.includes import iter_include_targets
from resolve.paths import UnresolvableIncludeError, include_target_at
from settings.config import RpgleMapConfig
from utils import is_free_format, split_lines

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cache.content import ContentSource
    from models.declarations import SymbolModel
    from resolve.paths import DocumentContext, ResolvedPath

logger = logging.getLogger(__name__)

# Linter configuration, resolved like an include target of the document.
LINT_CONFIG_TARGETS = {
    "member": "vscode,rpglint",
    "streamfile": ".vscode/rpglint.json",
}

LINT_CONFIG_MARKER = "RPGLINT"


class Linter(Protocol):
    """Style checker that consumes a symbol model."""

    def lint(
        self,
        text: str,
        options: Mapping[str, Any],
        model: SymbolModel | None,
    ) -> list[Any]: ...


class Workspace:
    """Symbol models for the documents of one editing session."""

    def __init__(
        self,
        source: ContentSource,
        *,
        config: RpgleMapConfig | None = None,
        linter: Linter | None = None,
    ) -> None:
        self.config = config or RpgleMapConfig()
        self.content_cache = ContentCache(
            source, home_directory=self.config.home_directory
        )
        self.symbol_cache = SymbolModelCache()
        self.linter = linter
        self._texts: dict[str, str] = {}

    # -- models -----------------------------------------------------------

    def get_symbol_model(
        self, document: DocumentContext, text: str | None = None
    ) -> SymbolModel | None:
        """Return the cached model, building it from text when absent.

        Without ``text`` the latest text reported for the document is used.
        Returns None only when nothing is cached and no text is known.
        """
        cached = self.symbol_cache.get(document)
        if cached is not None:
            return cached

        if text is None:
            text = self._texts.get(document.identity)
        if text is None:
            return None

        model = build_symbol_model(document, text, self.content_cache)
        self.symbol_cache.put(document, model)
        return model

    def invalidate(self, document: DocumentContext) -> None:
        self.symbol_cache.invalidate(document)

    def resolve_include_target(
        self, document: DocumentContext, raw_target: str
    ) -> ResolvedPath:
        return self.content_cache.resolve(document, raw_target)

    def include_at(self, document: DocumentContext, line: str) -> ResolvedPath | None:
        """Resolve the target of a ``/COPY`` or ``/INCLUDE`` line, if it is one."""
        target = include_target_at(line.strip())
        if target is None:
            return None
        try:
            return self.resolve_include_target(document, target)
        except UnresolvableIncludeError:
            return None

    # -- editor events ----------------------------------------------------

    def on_change(self, document: DocumentContext, text: str) -> SymbolModel | None:
        """Record new text, drop the stale model and rebuild free-format source."""
        self._texts[document.identity] = text
        self.invalidate(document)
        if not is_free_format(text):
            return None
        return self.get_symbol_model(document, text)

    def on_open(
        self, document: DocumentContext, text: str, language: str = "rpgle"
    ) -> SymbolModel | None:
        if language == "json":
            self._track_lint_config(document, text)
            return None

        if language != "rpgle":
            return None

        self._texts[document.identity] = text
        if not is_free_format(text):
            return None

        self.update_include_cache(document, text)
        self.load_linter_config(document)
        return self.get_symbol_model(document, text)

    def on_close(self, document: DocumentContext) -> None:
        """Forget the text and the cached model of a closed document."""
        self._texts.pop(document.identity, None)
        self.invalidate(document)

    def on_save(self, document: DocumentContext, text: str) -> None:
        self._texts[document.identity] = text
        if self.content_cache.refresh(document, text):
            # Any model may have pulled in the saved include.
            logger.debug("Include %s saved; dropping all models", document.identity)
            self.symbol_cache.clear()
        elif is_free_format(text):
            self.update_include_cache(document, text)

    def update_include_cache(self, document: DocumentContext, text: str) -> None:
        """Drop a cached model and make sure all of its includes are cached.

        Documents without a cached model are left alone; their includes are
        fetched when the model is first built.
        """
        if not self.symbol_cache.invalidate(document):
            return
        for target in iter_include_targets(split_lines(text)):
            self.content_cache.fetch(document, target)

    # -- linter -----------------------------------------------------------

    def linter_config_path(self, document: DocumentContext) -> ResolvedPath | None:
        target = LINT_CONFIG_TARGETS.get(document.scheme)
        if target is None:
            return None
        try:
            return self.resolve_include_target(document, target)
        except UnresolvableIncludeError:
            return None

    def load_linter_config(self, document: DocumentContext) -> None:
        target = LINT_CONFIG_TARGETS.get(document.scheme)
        if target is not None:
            self.content_cache.fetch(document, target)

    def _track_lint_config(self, document: DocumentContext, text: str) -> None:
        upper_path = document.path.upper()
        if document.scheme == "member" and upper_path.endswith(".JSON"):
            upper_path = upper_path[: -len(".JSON")]
        if LINT_CONFIG_MARKER in upper_path and upper_path not in self.content_cache:
            self.content_cache.put(upper_path, [text])

    def linter_options(self, document: DocumentContext) -> dict[str, Any]:
        """Parsed linter configuration for a document, or an empty mapping."""
        resolved = self.linter_config_path(document)
        if resolved is None:
            return {}

        lines = self.content_cache.get(resolved.canonical_path)
        if not lines:
            return {}

        json_string = "".join(lines).strip()
        if not json_string:
            return {}

        try:
            options = orjson.loads(json_string)
        except orjson.JSONDecodeError as exc:
            logger.warning(
                "Invalid linter configuration %s: %s", resolved.canonical_path, exc
            )
            return {}

        return options if isinstance(options, dict) else {}

    def lint(
        self, document: DocumentContext, text: str, *, indent: int = 2
    ) -> list[Any]:
        if self.linter is None or not is_free_format(text):
            return []

        options = {"indent": indent, **self.linter_options(document)}
        model = self.get_symbol_model(document, text)
        return list(self.linter.lint(text, options, model))


__all__ = ["LINT_CONFIG_TARGETS", "Linter", "Workspace"]
