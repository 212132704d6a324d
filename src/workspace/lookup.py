"""Read-only queries over a finished symbol model."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.declarations import Declaration, SymbolModel


def find_procedure(model: SymbolModel, word: str) -> Declaration | None:
    """Return the procedure named ``word`` (case-insensitive), if declared."""
    for procedure in model.procedures:
        if procedure.matches(word):
            return procedure
    return None


def find_definition(model: SymbolModel, word: str) -> Declaration | None:
    """Return the first declaration named ``word`` across all collections.

    Collections are searched in model field order: constants, variables,
    structures, procedures, subroutines.
    """
    for declaration in model.declarations():
        if declaration.matches(word):
            return declaration
    return None


def outline(model: SymbolModel, path: str) -> list[Declaration]:
    """Declarations positioned in ``path``, grouped as an outline shows them.

    Procedures and subroutines come first, then variables, structures and
    constants.
    """
    groups = (
        model.procedures,
        model.subroutines,
        model.variables,
        model.structures,
        model.constants,
    )
    return [
        declaration
        for group in groups
        for declaration in group
        if declaration.position is not None and declaration.position.path == path
    ]


def return_keywords(procedure: Declaration) -> tuple[str, ...]:
    """Keywords of a procedure that describe its return value."""
    return tuple(
        keyword for keyword in procedure.keywords if not keyword.startswith("EXTPROC")
    )


__all__ = ["find_definition", "find_procedure", "outline", "return_keywords"]
