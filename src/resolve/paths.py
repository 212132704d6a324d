"""Canonical addressing for ``/COPY`` and ``/INCLUDE`` targets.

A target is resolved against the document that contains the directive. Stream
file documents resolve targets as IFS paths (absolute, or joined beneath the
configured home directory). Member documents resolve targets as a member quad
(storage group, library, source file, member), inheriting whatever the target
does not spell out from the document's own address.

Canonical paths are upper-cased: both addressing forms are case-insensitive
on the host, and the canonical path is used as a cache key.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Literal

AddressingKind = Literal["member", "streamfile"]

DEFAULT_SOURCE_FILE = "QRPGLEREF"

INCLUDE_DIRECTIVES = frozenset({"/COPY", "/INCLUDE"})

_QUOTE = "'"


class UnresolvableIncludeError(ValueError):
    """Raised when no canonical address can be determined for a target."""


@dataclass(frozen=True)
class DocumentContext:
    """Identity and address of an editing document.

    ``path`` is the document path as the editor reports it, e.g.
    ``/MYLIB/QRPGLESRC/PGM.rpgle`` for a member or
    ``/home/dev/pgm.rpgle`` for a stream file.
    """

    scheme: AddressingKind
    path: str

    @property
    def identity(self) -> str:
        return self.path


@dataclass(frozen=True)
class ResolvedPath:
    canonical_path: str
    kind: AddressingKind
    member_path: tuple[str | None, str, str, str] | None = None

    @property
    def storage_group(self) -> str | None:
        return self.member_path[0] if self.member_path else None


def _strip_quotes(target: str) -> str:
    if target.startswith(_QUOTE):
        target = target[1:]
    if target.endswith(_QUOTE):
        target = target[:-1]
    return target


def _resolve_stream_path(target: str, home_directory: str) -> ResolvedPath:
    target = _strip_quotes(target)
    if not target:
        msg = "Empty stream file include target"
        raise UnresolvableIncludeError(msg)

    if target.startswith("/"):
        finished = target
    else:
        finished = posixpath.normpath(posixpath.join(home_directory or "/", target))

    return ResolvedPath(canonical_path=finished.upper(), kind="streamfile")


def _resolve_member_quad(target: str, working_path: str) -> ResolvedPath:
    lib_parts = target.split("/")
    member_parts = lib_parts[-1].split(",")
    working_parts = working_path.split("/")

    storage_group: str | None = None
    library: str | None = None
    source_file = DEFAULT_SOURCE_FILE

    # Leading "/" makes the first split element empty; 4 parts means no ASP.
    if len(working_parts) == 4:
        library = working_parts[1]
        source_file = working_parts[2]
    elif len(working_parts) == 5:
        storage_group = working_parts[1]
        library = working_parts[2]
        source_file = working_parts[3]

    if len(member_parts) == 2:
        source_file, member = member_parts
    else:
        member = member_parts[-1]

    if len(lib_parts) == 2:
        library = lib_parts[0]

    if "." in member:
        member = member[: member.rindex(".")]

    if not library or not source_file or not member:
        msg = f"Cannot resolve member include '{target}' from '{working_path}'"
        raise UnresolvableIncludeError(msg)

    segments = [library, source_file, member]
    if storage_group:
        segments.insert(0, storage_group)
    finished = "/" + "/".join(segments)

    quad = (
        storage_group.upper() if storage_group else None,
        library.upper(),
        source_file.upper(),
        member.upper(),
    )
    return ResolvedPath(
        canonical_path=finished.upper(), kind="member", member_path=quad
    )


def resolve_include_target(
    document: DocumentContext,
    target: str,
    *,
    home_directory: str = "/",
) -> ResolvedPath:
    """Resolve an include target exactly as written on a directive.

    Args:
        document: The document containing the directive.
        target: Target text, e.g. ``QRPGLEREF,UTILS``, ``'inc/utils.rpgle'``.
        home_directory: Base directory for relative stream file targets.

    Returns:
        ResolvedPath with the upper-cased canonical path and addressing kind.

    Raises:
        UnresolvableIncludeError: If the document scheme is unknown or the
            target cannot be mapped to a complete address.
    """
    target = target.strip()
    if not target:
        msg = "Empty include target"
        raise UnresolvableIncludeError(msg)

    if document.scheme == "streamfile":
        return _resolve_stream_path(target, home_directory)

    if document.scheme == "member":
        return _resolve_member_quad(target, document.path)

    msg = f"Unsupported addressing scheme '{document.scheme}'"
    raise UnresolvableIncludeError(msg)


def canonical_document_path(
    document: DocumentContext, *, home_directory: str = "/"
) -> str:
    """Return the canonical path a document is cached under when included."""
    if document.scheme == "member":
        return resolve_include_target(
            document, posixpath.basename(document.path), home_directory=home_directory
        ).canonical_path
    return document.path.upper()


def include_target_at(line: str) -> str | None:
    """Return the raw target of a ``/COPY`` or ``/INCLUDE`` line, if it is one."""
    pieces = line.split()
    if len(pieces) < 2 or pieces[0].upper() not in INCLUDE_DIRECTIVES:
        return None
    return pieces[1]


__all__ = [
    "DEFAULT_SOURCE_FILE",
    "INCLUDE_DIRECTIVES",
    "AddressingKind",
    "DocumentContext",
    "ResolvedPath",
    "UnresolvableIncludeError",
    "canonical_document_path",
    "include_target_at",
    "resolve_include_target",
]
