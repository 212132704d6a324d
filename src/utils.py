"""Shared utilities for rpglemap."""

from __future__ import annotations

FREE_FORMAT_MARKER = "**FREE"


def split_lines(text: str) -> list[str]:
    """Normalize line endings and split text into lines.

    Examples:
        >>> split_lines("a\\r\\nb")
        ['a', 'b']
        >>> split_lines("")
        ['']
    """
    return text.replace("\r", "").split("\n")


def is_free_format(text: str) -> bool:
    """Return True when the source starts with the ``**FREE`` marker."""
    return text[: len(FREE_FORMAT_MARKER)].upper() == FREE_FORMAT_MARKER
