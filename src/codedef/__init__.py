"""Extract code definitions from source files using tree-sitter."""

from .cli import __version__, main
from .definitions import (
    ELISION_MARKER,
    Definition,
    OutlineEntry,
    extract_signature,
    find_enclosing,
    list_definitions,
)
from .parsing import detect_language, parse_source, read_source
from .profiles import C_PROFILE, PROFILES, LanguageProfile, UnsupportedLanguageError, get_profile

__all__ = [
    "__version__",
    "main",
    "ELISION_MARKER",
    "Definition",
    "OutlineEntry",
    "extract_signature",
    "find_enclosing",
    "list_definitions",
    "detect_language",
    "parse_source",
    "read_source",
    "C_PROFILE",
    "PROFILES",
    "LanguageProfile",
    "UnsupportedLanguageError",
    "get_profile",
]
