"""
codedef: extract code definitions from source files using tree-sitter.

Given a line number, prints the innermost enclosing definition (function,
struct, union, enum, typedef, macro). Without one, prints an outline of every
definition in the file.
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO

from .definitions import Definition, OutlineEntry, find_enclosing, list_definitions
from .parsing import detect_language, parse_source, read_source
from .profiles import PROFILES, UnsupportedLanguageError, get_profile

# Get package version
try:
    from importlib.metadata import version, PackageNotFoundError
    __version__ = version("codedef")
except (ImportError, PackageNotFoundError):
    __version__ = "0.1.0"  # fallback for development

# ============================================================================
# CONSTANTS
# ============================================================================

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

COLUMN_GAP = '  '


# ============================================================================
# LOGGING
# ============================================================================

def write_to_log(log_file: TextIO, text: str, flush: bool = True) -> None:
    """Append text to the --log-file target, flushing by default."""
    log_file.write(text)
    if flush:
        log_file.flush()


class DetailedLogger:
    """
    Writes one line per codedef event to the --log-file target.

    Line format: [time] [+elapsed] [EVENT] message | key=value | ...
    """

    def __init__(self, log_file: TextIO):
        self.log_file = log_file
        self.start_time: Optional[datetime] = None

    def log_event(self, event_type: str, message: str, **kwargs) -> None:
        """Append an event line; keyword arguments become key=value fields."""
        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        elapsed = ""

        if self.start_time:
            elapsed_sec = (datetime.now() - self.start_time).total_seconds()
            elapsed = f" [+{elapsed_sec:.2f}s]"

        log_line = f"[{timestamp}]{elapsed} [{event_type}] {message}"

        if kwargs:
            log_line += " | " + " | ".join(f"{k}={v}" for k, v in kwargs.items())

        write_to_log(self.log_file, log_line + "\n")

    def log_definition(self, line: int, definition: Definition) -> None:
        """Record the definition found for a line."""
        self.log_event("SEARCH_RESULT", "Found definition", line=line, kind=definition.kind,
                       tag=definition.tag, start_line=definition.start_line, end_line=definition.end_line,
                       signature=definition.signature)

    def start_timing(self) -> None:
        """Measure elapsed times from now on."""
        self.start_time = datetime.now()


# ============================================================================
# RENDERING
# ============================================================================

def format_definition(definition: Definition, show_type: bool = False) -> List[str]:
    """Render a definition as numbered source lines, optionally with a type header."""
    lines = []
    if show_type:
        lines.append(f"# {definition.kind} starting at line {definition.start_line}")
    lines.extend(definition.numbered_lines())
    return lines


def format_outline(entries: List[OutlineEntry], tag_width: int) -> List[str]:
    """
    Render outline entries as aligned columns.

    Line numbers are right-aligned to the widest one; tags are padded to
    tag_width so signatures start in the same column.
    """
    if not entries:
        return []

    number_width = len(str(max(entry.start_line for entry in entries)))
    return [
        f"{entry.start_line:>{number_width}}{COLUMN_GAP}{entry.tag:<{tag_width}}{COLUMN_GAP}{entry.signature}"
        for entry in entries
    ]


# ============================================================================
# MAIN
# ============================================================================

def positive_int(value: str) -> int:
    """argparse type for 1-based line numbers."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid line number: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"line number must be 1 or greater, got {number}")
    return number


def setup_argument_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog='codedef',
        description='Extract code definitions from source files using tree-sitter',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s main.c 42               Print the definition enclosing line 42
  %(prog)s main.c 42 --show-type   Also print the definition's node type
  %(prog)s main.c                  Outline every definition in the file
  %(prog)s include/api.h --json    Outline as JSON
        """
    )

    parser.add_argument('file_path', type=Path, help='Path to the source file')
    parser.add_argument('line_number', type=positive_int, nargs='?',
                        help='Line number (1-based) to find the enclosing definition for; omit to list all definitions')
    parser.add_argument('-l', '--lang', choices=sorted(PROFILES),
                        help='Programming language (auto-detected from extension if not specified)')
    parser.add_argument('--show-type', action='store_true', help='Show the type of definition found')
    parser.add_argument('--json', action='store_true', help='Print results as JSON')
    parser.add_argument('--log-file', type=str, default=None, help='Write timestamped events to this file')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    return parser


def run(args: argparse.Namespace, logger: Optional[DetailedLogger] = None) -> int:
    """Read, parse and search or outline one file. Returns the exit code."""
    source = read_source(args.file_path)

    language = args.lang or detect_language(args.file_path)
    if language is None:
        raise UnsupportedLanguageError(args.file_path.suffix or args.file_path.name)
    profile = get_profile(language)

    tree = parse_source(source, language)
    if logger:
        logger.log_event("PARSE_END", "Parsed source", file=args.file_path, language=language,
                         bytes=len(source), root=tree.root_node.type)
        if tree.root_node.has_error:
            logger.log_event("PARSE_WARNING", "Syntax errors in source, results may be incomplete")

    if args.line_number is None:
        entries = list_definitions(tree, source, profile)
        if logger:
            logger.log_event("OUTLINE_RESULT", "Listed definitions", count=len(entries),
                             tags=",".join(sorted({entry.tag for entry in entries})))

        if args.json:
            print(json.dumps([entry.to_dict() for entry in entries], indent=2))
        else:
            for line in format_outline(entries, profile.tag_width):
                print(line)
        return EXIT_OK

    definition = find_enclosing(tree, source, profile, args.line_number)
    if definition is None:
        if logger:
            logger.log_event("SEARCH_RESULT", "No enclosing definition", line=args.line_number)
        print(f"No enclosing definition found for line {args.line_number}", file=sys.stderr)
        return EXIT_FAILURE

    if logger:
        logger.log_definition(args.line_number, definition)

    if args.json:
        print(json.dumps(definition.to_dict(), indent=2))
    else:
        for line in format_definition(definition, args.show_type):
            print(line)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for codedef."""
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    log_file = open(args.log_file, 'w', encoding='utf-8') if args.log_file else None
    logger = DetailedLogger(log_file) if log_file else None

    try:
        if logger:
            logger.start_timing()
            logger.log_event("START", "codedef starting", file=args.file_path,
                             line=args.line_number, lang=args.lang)
        return run(args, logger)

    except UnsupportedLanguageError as e:
        if logger:
            logger.log_event("ERROR", str(e))
        print(f"Error: {e} (use --lang to choose one of: {', '.join(sorted(PROFILES))})", file=sys.stderr)
        return EXIT_USAGE
    except (FileNotFoundError, IsADirectoryError) as e:
        if logger:
            logger.log_event("ERROR", str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except Exception as e:
        if logger:
            logger.log_event("ERROR", f"EXCEPTION - {e}")
        print(f"Unexpected error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    finally:
        if log_file:
            log_file.close()


if __name__ == '__main__':
    sys.exit(main())
