"""
Per-language tables describing which tree-sitter node kinds are definitions.

A profile is plain data: the search and outline code in definitions.py never
branches on the language. Adding a language means adding one profile here and
one grammar in parsing.py.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


class UnsupportedLanguageError(ValueError):
    """Raised when no profile or grammar exists for a language."""

    def __init__(self, language: str):
        self.language = language
        super().__init__(f"Unsupported language: {language}")


@dataclass(frozen=True)
class LanguageProfile:
    """Node-kind tables for one language."""
    name: str
    definition_kinds: frozenset
    compound_kinds: frozenset = frozenset()
    body_kinds: frozenset = frozenset()
    wrapper_kinds: frozenset = frozenset()
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Normalize so profiles can be declared with plain sets and dicts
        object.__setattr__(self, 'definition_kinds', frozenset(self.definition_kinds))
        object.__setattr__(self, 'compound_kinds', frozenset(self.compound_kinds))
        object.__setattr__(self, 'body_kinds', frozenset(self.body_kinds))
        object.__setattr__(self, 'wrapper_kinds', frozenset(self.wrapper_kinds))
        object.__setattr__(self, 'tags', MappingProxyType(dict(self.tags)))

        stray = self.compound_kinds - self.definition_kinds
        if stray:
            raise ValueError(f"{self.name}: compound kinds are not definitions: {sorted(stray)}")

        unwrapped = self.wrapper_kinds - self.definition_kinds
        if unwrapped:
            raise ValueError(f"{self.name}: wrapper kinds are not definitions: {sorted(unwrapped)}")

        untagged = self.definition_kinds - set(self.tags)
        if untagged:
            raise ValueError(f"{self.name}: definition kinds without a tag: {sorted(untagged)}")

    def is_definition(self, kind: str) -> bool:
        return kind in self.definition_kinds

    def is_compound(self, kind: str) -> bool:
        return kind in self.compound_kinds

    def is_body(self, kind: str) -> bool:
        return kind in self.body_kinds

    def is_wrapper(self, kind: str) -> bool:
        """Wrapper definitions (typedef) stand in for the compound directly inside them."""
        return kind in self.wrapper_kinds

    def tag_for(self, kind: str) -> str:
        """Short display tag for a definition kind. Raises KeyError for anything else."""
        if kind not in self.definition_kinds:
            raise KeyError(f"{self.name}: not a definition kind: {kind}")
        return self.tags[kind]

    @property
    def tag_width(self) -> int:
        """Width of the widest tag, used for the outline's tag column."""
        return max((len(tag) for tag in self.tags.values()), default=0)


# ============================================================================
# PROFILES
# ============================================================================

C_PROFILE = LanguageProfile(
    name="c",
    definition_kinds={
        "function_definition",
        "type_definition",       # typedef
        "preproc_def",           # #define
        "preproc_function_def",  # #define with parameters
        "struct_specifier",
        "union_specifier",
        "enum_specifier",
    },
    # struct/union/enum only count when they carry a body, so
    # "struct foo { ... }" is a definition and "struct foo *ptr" is not
    compound_kinds={
        "struct_specifier",
        "union_specifier",
        "enum_specifier",
    },
    body_kinds={
        "field_declaration_list",
        "enumerator_list",
        "compound_statement",
    },
    # "typedef struct { ... } T" is reported as the typedef, not the struct
    wrapper_kinds={
        "type_definition",
    },
    tags={
        "function_definition": "fn",
        "type_definition": "typedef",
        "preproc_def": "macro",
        "preproc_function_def": "macro",
        "struct_specifier": "struct",
        "union_specifier": "union",
        "enum_specifier": "enum",
    },
)

PROFILES: Mapping[str, LanguageProfile] = MappingProxyType({
    C_PROFILE.name: C_PROFILE,
})


def get_profile(language: str) -> LanguageProfile:
    """Look up the profile for a language name (case-insensitive)."""
    try:
        return PROFILES[language.lower()]
    except KeyError:
        raise UnsupportedLanguageError(language) from None
