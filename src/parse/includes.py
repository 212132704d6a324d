"""Discovery of ``/COPY`` and ``/INCLUDE`` targets in a document."""

from __future__ import annotations

from typing import TYPE_CHECKING

from resolve.paths import include_target_at

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cache.content import ContentCache
    from resolve.paths import DocumentContext


def iter_include_targets(lines: Sequence[str]) -> list[str]:
    """Return raw include targets, scanning from the last line to the first."""
    targets: list[str] = []
    for line in reversed(lines):
        target = include_target_at(line.strip())
        if target is not None:
            targets.append(target)
    return targets


def discover_includes(
    document: DocumentContext,
    lines: Sequence[str],
    content_cache: ContentCache,
) -> dict[str, tuple[str, ...]]:
    """Map file identifiers to lines: the document first, then each include.

    Includes appear in reverse textual order. Targets that cannot be resolved
    are left out; targets that cannot be fetched map to no lines.
    """
    files: dict[str, tuple[str, ...]] = {document.identity: tuple(lines)}
    for target in iter_include_targets(lines):
        canonical_path, include_lines = content_cache.fetch_resolved(document, target)
        if canonical_path is not None and canonical_path not in files:
            files[canonical_path] = include_lines
    return files


__all__ = ["discover_includes", "iter_include_targets"]
