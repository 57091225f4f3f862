"""
Source reading and tree-sitter parsing.
"""

from pathlib import Path
from typing import Callable, Dict, Optional

import tree_sitter_c as tsc
from tree_sitter import Language, Parser, Tree

from .profiles import UnsupportedLanguageError


# Language name -> function returning the compiled tree-sitter grammar
GRAMMARS: Dict[str, Callable] = {
    "c": tsc.language,
}

EXTENSIONS: Dict[str, str] = {
    ".c": "c",
    ".h": "c",
}


def detect_language(file_path: Path) -> Optional[str]:
    """Detect language from file extension, or None if unknown."""
    return EXTENSIONS.get(Path(file_path).suffix.lower())


def read_source(file_path: Path) -> bytes:
    """Read a source file as raw bytes; tree-sitter offsets are byte offsets."""
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    if file_path.is_dir():
        raise IsADirectoryError(f"Expected a file but received a directory: {file_path}")
    return file_path.read_bytes()


def parse_source(source: bytes, language: str) -> Tree:
    """Parse source bytes with the grammar for language."""
    try:
        grammar = GRAMMARS[language.lower()]
    except KeyError:
        raise UnsupportedLanguageError(language) from None

    parser = Parser(Language(grammar()))
    return parser.parse(source)
