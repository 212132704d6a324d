"""Parsing utilities for free-format RPGLE source."""

from parse.builder import build_symbol_model
from parse.declarations import (
    DeclarationAssembler,
    ProcedureIndex,
    assemble,
    takes_precedence,
    tokenize,
)
from parse.docs import DocumentationSnapshot, DocumentationTracker
from parse.includes import discover_includes, iter_include_targets

__all__ = [
    "DeclarationAssembler",
    "DocumentationSnapshot",
    "DocumentationTracker",
    "ProcedureIndex",
    "assemble",
    "build_symbol_model",
    "discover_includes",
    "iter_include_targets",
    "takes_precedence",
    "tokenize",
]
