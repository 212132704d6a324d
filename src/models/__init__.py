"""Symbol model records exposed to consumers."""

from models.declarations import (
    Declaration,
    DeclarationKind,
    Position,
    SymbolModel,
    Tag,
)
from models.triggers import ONE_LINE_TRIGGERS, TEMPLATE_KEYWORD, triggers_one_line

__all__ = [
    "ONE_LINE_TRIGGERS",
    "TEMPLATE_KEYWORD",
    "Declaration",
    "DeclarationKind",
    "Position",
    "SymbolModel",
    "Tag",
    "triggers_one_line",
]
