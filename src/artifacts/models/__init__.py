"""Artifact record models."""

from artifacts.models.symbols import (
    ARTIFACT_SCHEMA_VERSION,
    SYMBOLS_JSONL,
    ParameterRecord,
    SymbolRecord,
)

__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "SYMBOLS_JSONL",
    "ParameterRecord",
    "SymbolRecord",
]
