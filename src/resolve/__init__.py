"""Include target resolution."""

from resolve.paths import (
    DocumentContext,
    ResolvedPath,
    UnresolvableIncludeError,
    canonical_document_path,
    include_target_at,
    resolve_include_target,
)

__all__ = [
    "DocumentContext",
    "ResolvedPath",
    "UnresolvableIncludeError",
    "canonical_document_path",
    "include_target_at",
    "resolve_include_target",
]
