"""Declaration models for RPGLE symbol extraction.

This module contains the records produced for a document: one ``Declaration``
per named symbol and a ``SymbolModel`` holding the five ordered collections.
All records are frozen so a published model is never mutated in place.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

DeclarationKind = Literal[
    "constant", "variable", "structure", "procedure", "subroutine", "subitem"
]


class Position(BaseModel):
    """Originating file and zero-based line of a declaration."""

    model_config = ConfigDict(frozen=True)

    path: str
    line: int


class Tag(BaseModel):
    """A ``@name content`` annotation from a documentation block."""

    model_config = ConfigDict(frozen=True)

    tag: str
    content: str = ""


class Declaration(BaseModel):
    """A named symbol declared in RPGLE source."""

    model_config = ConfigDict(frozen=True)

    kind: DeclarationKind
    name: str
    keywords: tuple[str, ...] = ()
    display_keywords: tuple[str, ...] = Field(
        default=(), description="Keywords in source casing"
    )
    title: str | None = None
    description: str = ""
    tags: tuple[Tag, ...] = ()
    position: Position | None = None
    sub_items: tuple[Declaration, ...] = Field(
        default=(), description="Parameters, in declared order (procedures only)"
    )

    @model_validator(mode="after")
    def _only_procedures_have_sub_items(self) -> Declaration:
        if self.sub_items and self.kind != "procedure":
            msg = f"{self.kind} '{self.name}' cannot have sub items"
            raise ValueError(msg)
        return self

    def matches(self, name: str) -> bool:
        """Case-insensitive name comparison."""
        return self.name.upper() == name.upper()

    def find_tag(self, tag: str) -> Tag | None:
        """Return the first tag with the given name, if any."""
        for candidate in self.tags:
            if candidate.tag == tag:
                return candidate
        return None


class SymbolModel(BaseModel):
    """Immutable snapshot of every declaration visible from a document."""

    model_config = ConfigDict(frozen=True)

    constants: tuple[Declaration, ...] = ()
    variables: tuple[Declaration, ...] = ()
    structures: tuple[Declaration, ...] = ()
    procedures: tuple[Declaration, ...] = ()
    subroutines: tuple[Declaration, ...] = ()

    def declarations(self) -> Iterator[Declaration]:
        """Iterate over every declaration, collection by collection."""
        yield from self.constants
        yield from self.variables
        yield from self.structures
        yield from self.procedures
        yield from self.subroutines

    @property
    def declaration_count(self) -> int:
        return sum(1 for _ in self.declarations())


__all__ = ["Declaration", "DeclarationKind", "Position", "SymbolModel", "Tag"]
