"""Tests for reading, language detection and parsing."""
from pathlib import Path

import pytest

from codedef import UnsupportedLanguageError, detect_language, parse_source, read_source


def test_lang_detection():
    assert detect_language(Path("main.c")) == "c"
    assert detect_language(Path("include/api.h")) == "c"
    assert detect_language(Path("LEGACY.C")) == "c"
    assert detect_language(Path("script.py")) is None
    assert detect_language(Path("lib.rs")) is None
    assert detect_language(Path("Makefile")) is None


def test_read_source_returns_bytes(c_file):
    path = c_file("int x;\n")
    assert read_source(path) == b"int x;\n"


def test_read_source_missing_file(tmp_path):
    missing = tmp_path / "missing.c"
    with pytest.raises(FileNotFoundError, match="File not found"):
        read_source(missing)


def test_read_source_directory(tmp_path):
    with pytest.raises(IsADirectoryError, match="Expected a file but received a directory"):
        read_source(tmp_path)


def test_parse_source():
    tree = parse_source(b"int add(int a, int b) { return a + b; }\n", "c")

    assert tree.root_node.type == "translation_unit"
    assert tree.root_node.children[0].type == "function_definition"


def test_parse_source_unsupported_language():
    with pytest.raises(UnsupportedLanguageError):
        parse_source(b"fn main() {}", "rust")
