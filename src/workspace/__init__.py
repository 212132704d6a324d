"""Editor-facing workspace over the symbol model caches."""

from workspace.lookup import find_definition, find_procedure, outline, return_keywords
from workspace.session import LINT_CONFIG_TARGETS, Linter, Workspace

__all__ = [
    "LINT_CONFIG_TARGETS",
    "Linter",
    "Workspace",
    "find_definition",
    "find_procedure",
    "outline",
    "return_keywords",
]
