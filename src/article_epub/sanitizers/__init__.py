"""Sanitizers for making extracted HTML safe to embed in XHTML."""

from .sanitizer import (
    VOID_ELEMENTS,
    escape_ampersands,
    normalize_void_elements,
    prune_empty_wrappers,
    repair_malformed_tags,
    sanitize,
    strip_comments,
    strip_declarations,
    strip_scripts_and_styles,
)

__all__ = [
    "VOID_ELEMENTS",
    "sanitize",
    "repair_malformed_tags",
    "strip_scripts_and_styles",
    "strip_comments",
    "strip_declarations",
    "prune_empty_wrappers",
    "normalize_void_elements",
    "escape_ampersands",
]
