"""Keyword tables that change how a declaration line is assembled."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

# Keywords that make the matching END-* statement unnecessary.
ONE_LINE_TRIGGERS: dict[str, tuple[str, ...]] = {
    "DCL-DS": ("LIKEDS", "LIKEREC", "END-DS"),
    "DCL-PR": ("OVERLOAD", "END-PR"),
    "DCL-PI": ("END-PI",),
}

TEMPLATE_KEYWORD = "TEMPLATE"


def triggers_one_line(opcode: str, keywords: Iterable[str]) -> bool:
    """Return True when any keyword starts with a one-line trigger for opcode."""
    triggers = ONE_LINE_TRIGGERS.get(opcode)
    if not triggers:
        return False
    return any(keyword.startswith(triggers) for keyword in keywords)


__all__ = ["ONE_LINE_TRIGGERS", "TEMPLATE_KEYWORD", "triggers_one_line"]
