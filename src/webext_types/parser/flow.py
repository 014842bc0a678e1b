"""Strip Flow type annotations so the source parses as standard JavaScript.

Upstream ``program.js`` is written in JavaScript with Flow annotations.
The TypeScript grammar accepts the Flow subset used there (parameter,
variable, field and return annotations, ``type`` aliases, ``import type``,
generics), so it is used to *locate* annotation syntax. Every located byte
is then overwritten with a space.

Blanking instead of deleting keeps byte offsets and line numbers identical
between the original and the stripped source, so a syntax error reported on
the stripped text points at the right place in the upstream file.
Runtime code is never touched.

Example::

    >>> strip_flow_types("function f(a: string): void {}")
    'function f(a        )       {}'
"""

from __future__ import annotations

import logging
from typing import Iterator

from tree_sitter import Node

from webext_types.parser.syntax import parse_bytes

logger = logging.getLogger(__name__)

# Nodes that exist only in the type layer and are erased as a whole.
_ERASED_NODES = frozenset(
    {
        "type_annotation",
        "asserts_annotation",
        "type_predicate_annotation",
        "type_parameters",
        "type_arguments",
        "type_alias_declaration",
        "interface_declaration",
        "ambient_declaration",
        "implements_clause",
        "accessibility_modifier",
        "override_modifier",
    }
)

# Anonymous tokens erased when they appear directly under the given node.
_ERASED_TOKENS: dict[str, frozenset[str]] = {
    "optional_parameter": frozenset({"?", "readonly"}),
    "required_parameter": frozenset({"readonly"}),
    "public_field_definition": frozenset({"?", "!", "readonly", "declare"}),
}

_TYPE_ONLY_DECLARATIONS = frozenset({"type_alias_declaration", "interface_declaration"})
_TYPE_KEYWORDS = frozenset({"type", "typeof"})

_BLANK = ord(" ")
_KEEP = frozenset(b"\r\n")


def strip_flow_types(text: str) -> str:
    """Return *text* with all type-annotation syntax blanked out.

    Args:
        text: JavaScript source that may contain Flow annotations.

    Returns:
        Source of the same byte length and line structure with annotations
        replaced by spaces. Source without annotations is returned
        unchanged.
    """
    source = text.encode("utf-8")
    tree = parse_bytes("typescript", source)
    if tree.root_node.has_error:
        logger.debug("Type-annotation scan found syntax the TypeScript grammar rejects")

    buffer = bytearray(source)
    erased = 0
    for start, end in _erasable_spans(tree.root_node):
        for index in range(start, end):
            if buffer[index] not in _KEEP:
                buffer[index] = _BLANK
        erased += 1
    logger.debug("Erased %d type-annotation spans", erased)
    return buffer.decode("utf-8")


def _erasable_spans(root: Node) -> Iterator[tuple[int, int]]:
    """Yield ``(start_byte, end_byte)`` spans that belong to the type layer."""
    stack = [root]
    while stack:
        node = stack.pop()
        kind = node.type

        if kind in _ERASED_NODES:
            yield node.start_byte, node.end_byte
            continue

        if kind == "import_statement" and _has_token(node, _TYPE_KEYWORDS):
            yield node.start_byte, node.end_byte
            continue

        if kind == "export_statement" and _is_type_export(node):
            yield node.start_byte, node.end_byte
            continue

        if kind in ("import_specifier", "export_specifier") and _has_token(node, _TYPE_KEYWORDS):
            yield _specifier_span(node)
            continue

        if kind in ("as_expression", "satisfies_expression"):
            # Keep the expression, drop "as T" / "satisfies T".
            keyword = next(c for c in node.children if c.type in ("as", "satisfies"))
            yield keyword.start_byte, node.end_byte
            stack.append(node.children[0])
            continue

        if kind == "non_null_expression":
            yield node.children[-1].start_byte, node.end_byte
            stack.append(node.children[0])
            continue

        tokens = _ERASED_TOKENS.get(kind)
        for child in reversed(node.children):
            if tokens is not None and not child.is_named and child.type in tokens:
                yield child.start_byte, child.end_byte
            else:
                stack.append(child)


def _has_token(node: Node, tokens: frozenset[str]) -> bool:
    """Whether *node* has a direct anonymous child whose text is in *tokens*."""
    return any(not child.is_named and child.type in tokens for child in node.children)


def _is_type_export(node: Node) -> bool:
    """``export type X = ...``, ``export interface X {}``, and ``export type { X }``."""
    declaration = node.child_by_field_name("declaration")
    if declaration is not None and declaration.type in _TYPE_ONLY_DECLARATIONS:
        return True
    return _has_token(node, _TYPE_KEYWORDS)


def _specifier_span(node: Node) -> tuple[int, int]:
    """Span of a ``type X`` specifier including one adjacent comma."""
    following = node.next_sibling
    if following is not None and following.type == ",":
        return node.start_byte, following.end_byte
    preceding = node.prev_sibling
    if preceding is not None and preceding.type == ",":
        return preceding.start_byte, node.end_byte
    return node.start_byte, node.end_byte
