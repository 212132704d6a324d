"""Content source backed by a local directory tree.

Stream files live at ``<root>/<path>``. Members live at
``<root>/[<ASP>/]<LIBRARY>/<SOURCE FILE>/<MEMBER>.<ext>``. Names are matched
case-insensitively since canonical paths arrive upper-cased.
"""

from __future__ import annotations

from pathlib import Path

from cache.content import FetchError
from scan.files import _is_within_root

_RELATIVE_PARTS = frozenset({".", ".."})


def _find_child(directory: Path, name: str) -> Path | None:
    exact = directory / name
    if exact.exists():
        return exact
    wanted = name.upper()
    try:
        for child in sorted(directory.iterdir()):
            if child.name.upper() == wanted:
                return child
    except OSError:
        return None
    return None


def _find_member(directory: Path, member: str) -> Path | None:
    wanted = member.upper()
    try:
        candidates = sorted(directory.iterdir())
    except OSError:
        return None
    for child in candidates:
        if child.is_file() and child.name.split(".", 1)[0].upper() == wanted:
            return child
    return None


class FileSystemContentSource:
    """Serves member and stream file content from a local directory."""

    def __init__(self, root: Path, *, encoding: str = "utf-8") -> None:
        self.root = root
        self.encoding = encoding

    def _locate(self, parts: list[str]) -> Path | None:
        current: Path | None = self.root
        for part in parts:
            if current is None or part in _RELATIVE_PARTS or not current.is_dir():
                return None
            current = _find_child(current, part)
        if current is None or not _is_within_root(current, self.root):
            return None
        return current

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read {path}: {exc}"
            raise FetchError(msg) from exc

    def fetch_stream_content(self, path: str) -> str:
        parts = [part for part in path.split("/") if part]
        found = self._locate(parts)
        if found is None or not found.is_file():
            msg = f"Stream file not found: {path}"
            raise FetchError(msg)
        return self._read(found)

    def fetch_member_content(
        self,
        storage_group: str | None,
        library: str,
        source_file: str,
        member: str,
    ) -> str:
        parts = [library, source_file]
        if storage_group:
            parts.insert(0, storage_group)

        source_dir = self._locate(parts)
        found = _find_member(source_dir, member) if source_dir is not None else None
        if found is None or not _is_within_root(found, self.root):
            address = "/".join([*parts, member])
            msg = f"Member not found: {address}"
            raise FetchError(msg)
        return self._read(found)


__all__ = ["FileSystemContentSource"]
