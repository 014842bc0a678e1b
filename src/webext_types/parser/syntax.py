"""Tree-sitter grammars, parsing, and tree traversal helpers.

Grammars are loaded from their Python wheels (``tree_sitter_javascript``,
``tree_sitter_typescript``) and cached for the lifetime of the process.
The TypeScript grammar is only used by :mod:`webext_types.parser.flow` to
locate type annotations; the option-schema extractor works on the tree the
JavaScript grammar produces from the type-stripped source.

Every consumer walks trees through :func:`walk_preorder`, which visits
``(node, parent)`` pairs in document order and can be abandoned as soon as
the caller has what it needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from importlib import import_module
from typing import Any, Iterator, Optional

from tree_sitter import Language, Node, Parser, Tree

from webext_types.exceptions import ConfigError, ParseError

# Grammar name -> (importable package, language factory attribute)
_GRAMMARS: dict[str, tuple[str, str]] = {
    "javascript": ("tree_sitter_javascript", "language"),
    "typescript": ("tree_sitter_typescript", "language_typescript"),
}


@cache
def load_language(name: str) -> Language:
    """Load a Tree-sitter grammar from its Python package.

    Args:
        name: Grammar name, ``"javascript"`` or ``"typescript"``.

    Returns:
        The instantiated :class:`~tree_sitter.Language`.

    Raises:
        ConfigError: If the grammar is unknown, its package is not
            installed, or the package does not expose the expected factory.
    """
    try:
        package, factory_name = _GRAMMARS[name]
    except KeyError as exc:
        raise ConfigError(f"Unknown grammar '{name}'") from exc
    try:
        module = import_module(package)
    except ModuleNotFoundError as exc:
        raise ConfigError(
            f"Tree-sitter package '{package}' is not installed. "
            f"Install it with: pip install {package.replace('_', '-')}"
        ) from exc
    factory = getattr(module, factory_name, None)
    if factory is None:
        raise ConfigError(
            f"Tree-sitter package '{package}' does not expose '{factory_name}()'"
        )
    return Language(factory())


def parse_bytes(grammar: str, data: bytes) -> Tree:
    """Parse a UTF-8 byte buffer with the named grammar.

    Tree-sitter never fails outright: syntax errors show up as ``ERROR``
    and missing nodes inside the returned tree.
    """
    parser = Parser()
    parser.language = load_language(grammar)
    return parser.parse(data)


@dataclass(frozen=True)
class SourceTree:
    """A parsed JavaScript module together with the bytes it was parsed from.

    Node byte offsets index into :attr:`source`, so the two always travel
    together.
    """

    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        """The ``program`` node."""
        return self.tree.root_node

    @property
    def text(self) -> str:
        """The parsed source as text."""
        return self.source.decode("utf-8")


def parse_module(text: str) -> SourceTree:
    """Parse type-free JavaScript as an ECMAScript module.

    Args:
        text: Source text with all non-standard type syntax removed.

    Returns:
        The parsed :class:`SourceTree`.

    Raises:
        ParseError: If the tree contains any syntax error, reported with the
            1-based line and column of the first one.
    """
    source = text.encode("utf-8")
    tree = parse_bytes("javascript", source)
    if tree.root_node.has_error:
        bad = first_error(tree.root_node)
        if bad is None:
            raise ParseError("Source could not be parsed as JavaScript")
        line = bad.start_point[0] + 1
        column = bad.start_point[1] + 1
        what = f"missing '{bad.type}'" if bad.is_missing else "unexpected syntax"
        snippet = node_text(bad, source).splitlines()
        detail = f" near {snippet[0][:40]!r}" if snippet and snippet[0] else ""
        raise ParseError(
            f"Source could not be parsed as JavaScript: {what} at line {line}, "
            f"column {column}{detail}",
            line=line,
            column=column,
        )
    return SourceTree(source=source, tree=tree)


def first_error(root: Node) -> Optional[Node]:
    """Return the first ``ERROR`` or missing node in document order, if any."""
    for node, _ in walk_preorder(root, named_only=False):
        if node.type == "ERROR" or node.is_missing:
            return node
    return None


def walk_preorder(
    root: Node, named_only: bool = True
) -> Iterator[tuple[Node, Optional[Node]]]:
    """Yield ``(node, parent)`` pairs in pre-order (document order).

    The walk uses an explicit stack, so arbitrarily deep trees do not hit
    the recursion limit. Callers stop the walk by leaving the loop.

    Args:
        root: Node to start from. It is yielded first with parent ``None``.
        named_only: Skip anonymous tokens (punctuation, keywords).
    """
    stack: list[tuple[Node, Optional[Node]]] = [(root, None)]
    while stack:
        node, parent = stack.pop()
        yield node, parent
        children = node.named_children if named_only else node.children
        for child in reversed(children):
            stack.append((child, node))


def node_text(node: Node, source: bytes) -> str:
    """Return the source text spanned by *node*."""
    return source[node.start_byte : node.end_byte].decode("utf-8", "replace")


def dump_tree(node: Node, source: bytes) -> dict[str, Any]:
    """Build a JSON-serialisable dump of the named nodes under *node*.

    Each entry carries the node kind, byte range, 1-based start line, the
    field name it occupies in its parent (when any), the text of leaf
    nodes, and its named children.
    """
    entry: dict[str, Any] = {
        "type": node.type,
        "start": node.start_byte,
        "end": node.end_byte,
        "line": node.start_point[0] + 1,
    }
    if node.named_child_count == 0:
        entry["text"] = node_text(node, source)
        return entry
    children: list[dict[str, Any]] = []
    for index, child in enumerate(node.children):
        if not child.is_named:
            continue
        child_entry = dump_tree(child, source)
        field = node.field_name_for_child(index)
        if field is not None:
            child_entry = {"field": field, **child_entry}
        children.append(child_entry)
    entry["children"] = children
    return entry
