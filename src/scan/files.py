"""Discovery of RPGLE sources below a project root.

A file is a source when its name ends with one of the configured extensions
(compared case-folded, so ``PGM.RPGLE`` and ``pgm.rpgle`` both qualify), it
is not ignored by git, it lies outside the artifact output directory and it
survives the configured include/exclude globs. Symlinks that lead out of the
root are never followed.
"""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

from settings.config import RpgleMapConfig

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    GitignoreMatcher = Callable[[str], bool]


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        return path.resolve().is_relative_to(root.resolve())
    except OSError:
        return False


def _build_gitignore_matcher(
    root: Path, *, nested_gitignore: bool
) -> GitignoreMatcher | None:
    """Compose the ``.gitignore`` rules that apply below ``root``.

    Without nesting only ``root/.gitignore`` is consulted. Symlinked ignore
    files are skipped so rules from outside the root never apply.
    """
    if nested_gitignore:
        candidates = sorted(root.rglob(".gitignore"))
    else:
        candidates = [root / ".gitignore"]

    matchers = [
        cast("GitignoreMatcher", parse_gitignore(path))
        for path in candidates
        if path.is_file() and not path.is_symlink()
    ]
    if not matchers:
        return None

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                # Paths outside a nested ignore file's base directory.
                continue
        return False

    return matches


@dataclass(frozen=True)
class _SourceSelector:
    root: Path
    extensions: tuple[str, ...]
    skipped_dir: tuple[str, ...]
    include: tuple[str, ...]
    exclude: tuple[str, ...]
    ignored: GitignoreMatcher | None

    def accepts(self, path: Path) -> bool:
        if not path.name.casefold().endswith(self.extensions):
            return False
        if path.is_symlink() or not path.is_file():
            return False
        if not _is_within_root(path, self.root):
            return False

        relative = PurePosixPath(path.relative_to(self.root).as_posix())
        if self.skipped_dir and relative.parts[: len(self.skipped_dir)] == (
            self.skipped_dir
        ):
            return False
        if self.ignored is not None and self.ignored(str(path)):
            return False

        rel_str = str(relative)
        if self.include and not any(fnmatch(rel_str, pat) for pat in self.include):
            return False
        return not any(fnmatch(rel_str, pat) for pat in self.exclude)


def find_source_files(
    directory: Path,
    config: RpgleMapConfig | None = None,
    *,
    output_dir: str | None = None,
) -> Iterator[Path]:
    """Yield RPGLE sources under ``directory`` in relative-path order.

    Args:
        directory: Project root to scan.
        config: Extensions, globs and gitignore mode (defaults when omitted).
        output_dir: Root-relative directory to skip; defaults to the
            configured ``output_dir``. An empty string skips nothing.
    """
    config = config or RpgleMapConfig()
    skipped = config.output_dir if output_dir is None else output_dir

    selector = _SourceSelector(
        root=directory,
        extensions=tuple(ext.casefold() for ext in config.extensions),
        skipped_dir=PurePosixPath(skipped).parts if skipped else (),
        include=tuple(config.include),
        exclude=tuple(config.exclude),
        ignored=_build_gitignore_matcher(
            directory, nested_gitignore=config.nested_gitignore
        ),
    )

    sources = [path for path in directory.rglob("*") if selector.accepts(path)]
    yield from sorted(sources, key=lambda p: p.relative_to(directory).as_posix())


__all__ = ["find_source_files"]
