"""Pytest fixtures for codedef testing."""
import subprocess
import sys
from pathlib import Path
from textwrap import dedent

import pytest

from codedef import C_PROFILE, parse_source


# Line numbers matter: tests refer to them directly
GEOMETRY_C = dedent("""\
    /* Geometry helpers */
    #include <stdio.h>
    #define MAX_SIZE 100


    struct Point {
        int x;
        int y;
    };

    typedef struct {
        int id;
        char name[32];
    } Record;

    enum Color {
        RED,
        GREEN,
    };

    #define SQUARE(x) ((x) * (x))
    int add(int a, int b) {
        return a + b;
    }
    """)


class ParsedSource:
    """Source bytes together with their tree-sitter tree."""

    def __init__(self, text: str):
        self.source = text.encode('utf-8')
        self.tree = parse_source(self.source, "c")
        self.profile = C_PROFILE


@pytest.fixture
def parse_c():
    """Parse a C snippet, returning a ParsedSource."""
    return ParsedSource


@pytest.fixture
def geometry():
    """The multi-definition sample file, parsed."""
    return ParsedSource(GEOMETRY_C)


@pytest.fixture
def c_file(tmp_path):
    """Write C source to a temporary file and return its path."""
    def _write(content: str, name: str = "sample.c") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding='utf-8')
        return path
    return _write


@pytest.fixture(scope="session")
def test_venv(tmp_path_factory):
    """Create isolated virtualenv for installation testing."""
    venv_dir = tmp_path_factory.mktemp("venv")

    subprocess.run([sys.executable, "-m", "venv", str(venv_dir)], check=True)

    if sys.platform == "win32":
        python_path = venv_dir / "Scripts" / "python.exe"
        pip_path = venv_dir / "Scripts" / "pip.exe"
    else:
        python_path = venv_dir / "bin" / "python"
        pip_path = venv_dir / "bin" / "pip"

    subprocess.run([str(python_path), "-m", "pip", "install", "--upgrade", "pip"],
                   check=True, capture_output=True)

    yield {
        "venv_dir": venv_dir,
        "python": python_path,
        "pip": pip_path,
    }


@pytest.fixture(scope="session")
def built_wheel(tmp_path_factory):
    """Build wheel once for all installation tests."""
    project_root = Path(__file__).parent.parent
    build_dir = tmp_path_factory.mktemp("build")

    subprocess.run(
        [sys.executable, "-m", "build", "--wheel", "--outdir", str(build_dir)],
        cwd=project_root,
        capture_output=True,
        check=True
    )

    wheels = list(build_dir.glob("*.whl"))
    assert len(wheels) == 1, f"Expected 1 wheel, found {len(wheels)}"

    return wheels[0]


@pytest.fixture
def geometry_file(c_file):
    """The multi-definition sample written to a .c file."""
    return c_file(GEOMETRY_C)
