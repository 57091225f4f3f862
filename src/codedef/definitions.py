"""
Find and list definitions (function, struct, union, enum, typedef, macro) in a
tree-sitter syntax tree.

Two entry points:

* find_enclosing() returns the innermost definition containing a line.
* list_definitions() returns an outline of every definition in source order.

Which node kinds count as definitions is decided by a LanguageProfile; nothing
here is specific to one language. Both walks use an explicit stack so deeply
nested input cannot exhaust the interpreter's recursion limit.
"""

import re
from dataclasses import asdict, dataclass
from typing import List, Optional

from .profiles import LanguageProfile


# Replaces a body nested inside another definition's signature
ELISION_MARKER = '{ ... }'

LINE_CONTINUATION = re.compile(rb'\\\r?\n')


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass(frozen=True)
class Definition:
    """Innermost definition enclosing a line."""
    start_line: int
    end_line: int
    kind: str
    tag: str
    signature: str
    full_text: str

    def numbered_lines(self) -> List[str]:
        """Source lines of the definition prefixed with their original line numbers."""
        return [f"{i}. {line}" for i, line in enumerate(self.full_text.splitlines(), start=self.start_line)]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class OutlineEntry:
    """One line of a file outline."""
    start_line: int
    tag: str
    signature: str
    kind: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


# ============================================================================
# NODE HELPERS
# ============================================================================

def _root(tree):
    """Accept either a tree_sitter.Tree or a node."""
    return getattr(tree, 'root_node', tree)


def start_line(node) -> int:
    """1-based line on which the node starts."""
    return node.start_point[0] + 1


def end_line(node) -> int:
    """
    1-based last line covered by the node.

    Tree-sitter reports end_point as the position after the last byte of the
    node. When that position is at column 0 of the next line, the node does
    not cover that line; a #define ending in its newline covers only its own
    line.
    """
    end_row, end_col = node.end_point
    last = end_row + 1 if end_col > 0 else end_row
    return max(last, start_line(node))


def contains_line(node, line: int) -> bool:
    return start_line(node) <= line <= end_line(node)


def _body_child(node, profile: LanguageProfile):
    """First immediate child that is a body, if any."""
    for child in node.children:
        if profile.is_body(child.type):
            return child
    return None


def _nested_body(node, profile: LanguageProfile):
    """First body anywhere inside the node, in source order."""
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        if profile.is_body(current.type):
            return current
        stack.extend(reversed(current.children))
    return None


def is_definition_node(node, profile: LanguageProfile) -> bool:
    """
    Check whether a node is a definition under the profile.

    Compound kinds (struct/union/enum) only count when they carry a body,
    which separates "struct foo { ... }" from "struct foo *ptr".
    """
    kind = node.type
    if not profile.is_definition(kind):
        return False
    if profile.is_compound(kind):
        return _body_child(node, profile) is not None
    return True


def _descends(node, profile: LanguageProfile, is_definition: bool) -> bool:
    """Outline walk: children of non-compound definitions are not listed."""
    return not is_definition or profile.is_compound(node.type)


def _text(source: bytes, start: int, end: int) -> str:
    return source[start:end].decode('utf-8', errors='replace')


def _elided(node, source: bytes, end: int, profile: LanguageProfile) -> bytes:
    """Source from the node's start up to end, with every body in that range replaced by ELISION_MARKER."""
    pieces = []
    cursor = node.start_byte
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        if current.start_byte >= end:
            continue
        if profile.is_body(current.type):
            pieces.append(source[cursor:current.start_byte])
            pieces.append(b" " + ELISION_MARKER.encode() + b" ")
            cursor = current.end_byte
            continue
        stack.extend(reversed(current.children))
    pieces.append(source[cursor:end])
    return b"".join(pieces)


def _one_line(raw: bytes) -> str:
    """Join continuation lines and collapse all whitespace runs to single spaces."""
    raw = LINE_CONTINUATION.sub(b' ', raw)
    return ' '.join(raw.decode('utf-8', errors='replace').split())


# ============================================================================
# SIGNATURE EXTRACTION
# ============================================================================

def extract_signature(node, source: bytes, profile: LanguageProfile) -> str:
    """Returns the one-line signature of a definition node.

    Args:
        node: A definition node.
        source: The bytes the tree was parsed from.
        profile: Language profile naming the body node kinds.

    Returns:
        * The header up to its own body when the node has a body child
          ("int add(int a, int b)", "struct Point"). Bodies of
          definitions inside the header are elided
          ("struct P { ... } make(void)").
        * The header up to a nested body followed by ELISION_MARKER when the
          body belongs to a wrapped definition ("typedef struct { ... }").
        * The whole node text otherwise, e.g. a complete #define directive.
    """
    body = _body_child(node, profile)
    if body is not None:
        return _one_line(_elided(node, source, body.start_byte, profile))

    nested = _nested_body(node, profile)
    if nested is not None:
        header = _one_line(source[node.start_byte:nested.start_byte])
        return f"{header} {ELISION_MARKER}" if header else ELISION_MARKER

    return _one_line(source[node.start_byte:node.end_byte])


# ============================================================================
# INNERMOST-ENCLOSING SEARCH
# ============================================================================

def find_enclosing_node(tree, profile: LanguageProfile, line: int):
    """
    Return the innermost definition node containing line, or None.

    Nodes that do not contain the line are pruned. Every child of a containing
    node is searched in order and a match in a child wins over its parent, so
    the first definition to finish in post-order is the answer. A compound
    directly inside a wrapper (the struct of "typedef struct { ... } T") never
    matches on its own; the wrapper does.
    """
    stack = [(_root(tree), False, False)]
    while stack:
        node, children_done, wrapped = stack.pop()
        if children_done:
            if is_definition_node(node, profile) and not (wrapped and profile.is_compound(node.type)):
                return node
            continue

        if not contains_line(node, line):
            continue

        stack.append((node, True, wrapped))
        wraps_children = profile.is_wrapper(node.type)
        for child in reversed(node.children):
            stack.append((child, False, wraps_children))

    return None


def find_enclosing(tree, source: bytes, profile: LanguageProfile, line: int) -> Optional[Definition]:
    """Returns the innermost definition enclosing a line.

    Args:
        tree: A tree_sitter.Tree, or the node to search from.
        source: The bytes the tree was parsed from.
        profile: Language profile for the tree's language.
        line: 1-based line number whose containing definition is sought.

    Returns:
        A Definition carrying the signature and the exact source text, or
        None when the line is not inside any definition (comments, includes,
        blank lines, or a line outside the file).
    """
    node = find_enclosing_node(tree, profile, line)
    if node is None:
        return None

    return Definition(
        start_line=start_line(node),
        end_line=end_line(node),
        kind=node.type,
        tag=profile.tag_for(node.type),
        signature=extract_signature(node, source, profile),
        full_text=_text(source, node.start_byte, node.end_byte),
    )


# ============================================================================
# OUTLINE GENERATION
# ============================================================================

def list_definitions(tree, source: bytes, profile: LanguageProfile) -> List[OutlineEntry]:
    """
    Outline every definition in the tree, in source order.

    Pre-order walk: a definition is listed before anything nested in it.
    Only compound definitions (struct/union/enum in C) are descended, so
    fields of a typedef'd struct or locals of a function are not listed.
    """
    entries = []
    stack = [_root(tree)]
    while stack:
        node = stack.pop()
        is_definition = is_definition_node(node, profile)
        if is_definition:
            entries.append(OutlineEntry(
                start_line=start_line(node),
                tag=profile.tag_for(node.type),
                signature=extract_signature(node, source, profile),
                kind=node.type,
            ))
        if _descends(node, profile, is_definition):
            stack.extend(reversed(node.children))

    return entries
