"""Symbol rows written to ``symbols.jsonl``.

One row per declaration, flattened so each line of the artifact can be read
without the rest of the model.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from models.declarations import Declaration, DeclarationKind

ARTIFACT_SCHEMA_VERSION = 1

SYMBOLS_JSONL = "symbols.jsonl"


class ParameterRecord(BaseModel):
    name: str
    keywords: list[str]
    description: str = ""


class SymbolRecord(BaseModel):
    """A declaration as seen from one scanned document."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    document: str = Field(description="Path of the scanned document")
    path: str = Field(description="File the symbol is declared in")
    line: int = Field(description="Zero-based line within path")
    kind: DeclarationKind
    name: str
    keywords: list[str]
    title: str | None = None
    description: str = ""
    tags: dict[str, list[str]] = Field(default_factory=dict)
    parameters: list[ParameterRecord] = Field(default_factory=list)

    @classmethod
    def from_declaration(cls, document: str, declaration: Declaration) -> SymbolRecord:
        tags: dict[str, list[str]] = {}
        for tag in declaration.tags:
            tags.setdefault(tag.tag, []).append(tag.content)

        position = declaration.position
        return cls(
            document=document,
            path=position.path if position else document,
            line=position.line if position else 0,
            kind=declaration.kind,
            name=declaration.name,
            keywords=list(declaration.display_keywords),
            title=declaration.title,
            description=declaration.description,
            tags=tags,
            parameters=[
                ParameterRecord(
                    name=parameter.name,
                    keywords=list(parameter.display_keywords),
                    description=parameter.description,
                )
                for parameter in declaration.sub_items
            ],
        )


__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "SYMBOLS_JSONL",
    "ParameterRecord",
    "SymbolRecord",
]
