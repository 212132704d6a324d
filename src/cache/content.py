"""Raw line cache for include targets and linter configuration files."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from resolve.paths import (
    UnresolvableIncludeError,
    canonical_document_path,
    resolve_include_target,
)
from utils import split_lines

if TYPE_CHECKING:
    from resolve.paths import DocumentContext, ResolvedPath

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised by a content source when a member or stream file cannot be read."""


class ContentSource(Protocol):
    """Remote storage that serves member and stream file content."""

    def fetch_member_content(
        self,
        storage_group: str | None,
        library: str,
        source_file: str,
        member: str,
    ) -> str: ...

    def fetch_stream_content(self, path: str) -> str: ...


class ContentCache:
    """Maps canonical paths to the last fetched lines of that file.

    Entries are created on first reference and only replaced by ``refresh``
    or ``put``; they never expire on their own.
    """

    def __init__(self, source: ContentSource, *, home_directory: str = "/") -> None:
        self._source = source
        self.home_directory = home_directory
        self._lines: dict[str, tuple[str, ...]] = {}

    def __contains__(self, canonical_path: object) -> bool:
        return canonical_path in self._lines

    def get(self, canonical_path: str) -> tuple[str, ...] | None:
        return self._lines.get(canonical_path)

    def put(self, canonical_path: str, lines: list[str] | tuple[str, ...]) -> None:
        self._lines[canonical_path] = tuple(lines)

    def resolve(self, document: DocumentContext, target: str) -> ResolvedPath:
        return resolve_include_target(
            document, target, home_directory=self.home_directory
        )

    def _download(self, resolved: ResolvedPath) -> str:
        if resolved.kind == "member":
            if resolved.member_path is None:
                msg = f"Member address missing for {resolved.canonical_path}"
                raise UnresolvableIncludeError(msg)
            storage_group, library, source_file, member = resolved.member_path
            return self._source.fetch_member_content(
                storage_group, library, source_file, member
            )
        return self._source.fetch_stream_content(resolved.canonical_path)

    def fetch_resolved(
        self, document: DocumentContext, target: str
    ) -> tuple[str | None, tuple[str, ...]]:
        """Fetch a target; return its canonical path (or None) and its lines."""
        try:
            resolved = self.resolve(document, target)
        except UnresolvableIncludeError as exc:
            logger.warning("Skipping include %r: %s", target, exc)
            return None, ()

        cached = self._lines.get(resolved.canonical_path)
        if cached is not None:
            return resolved.canonical_path, cached

        try:
            content = self._download(resolved)
        except Exception as exc:  # noqa: BLE001 - any source failure means no lines
            logger.warning(
                "Failed to fetch %s %s: %s",
                resolved.kind,
                resolved.canonical_path,
                exc,
            )
            return resolved.canonical_path, ()

        lines = tuple(split_lines(content))
        self._lines[resolved.canonical_path] = lines
        return resolved.canonical_path, lines

    def fetch(self, document: DocumentContext, target: str) -> tuple[str, ...]:
        """Return the lines of an include target, or no lines on any failure."""
        _, lines = self.fetch_resolved(document, target)
        return lines

    def refresh(self, document: DocumentContext, text: str) -> bool:
        """Replace the cached lines of a saved document that is a tracked include.

        Returns:
            True if the document was tracked and its entry was replaced.
        """
        try:
            canonical = canonical_document_path(
                document, home_directory=self.home_directory
            )
        except UnresolvableIncludeError:
            return False

        if canonical not in self._lines:
            return False

        logger.debug("Refreshing cached lines for %s", canonical)
        self._lines[canonical] = tuple(split_lines(text))
        return True


__all__ = ["ContentCache", "ContentSource", "FetchError"]
