"""Literal-only interpreter for JavaScript expressions.

Option schemas are object literals inside upstream source. Instead of
executing that source, :class:`LiteralEvaluator` interprets the small
expression subset schemas are written in and refuses everything else:

* object literals (identifier, string, numeric, computed and shorthand keys,
  spreads, methods) and array literals (with spreads)
* strings with every escape form, template strings, numbers in every
  notation, ``true``/``false``/``null``/``undefined``
* parenthesised expressions, unary ``- + ! void`` and binary
  ``+ - * / % **`` (``+`` concatenates as JavaScript does when either side
  is a string), plus the short-circuit operators ``|| && ??``
* function and arrow expressions, which become opaque
  :class:`~webext_types.models.JsFunction` values and are never run

Identifiers are resolved through a symbol table supplied by the caller
(see :attr:`~webext_types.models.GeneratorConfig.symbols`). An unknown
identifier, or any other kind of expression (calls, member access,
``new``, ...), raises :class:`~webext_types.exceptions.ExtractionGapError`.

``null`` and ``undefined`` both evaluate to ``None``.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Mapping, Optional

from tree_sitter import Node

from webext_types.exceptions import ExtractionGapError
from webext_types.models import JsFunction
from webext_types.parser.syntax import node_text

_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-7]{1,3}|\r\n|[\s\S])"
)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    # Line continuations
    "\n": "",
    "\r": "",
    "\r\n": "",
    "\u2028": "",
    "\u2029": "",
}

_FUNCTION_NODES = frozenset(
    {"arrow_function", "function_expression", "function", "generator_function"}
)

_SKIPPED = frozenset({"comment"})


def decode_js_escapes(body: str) -> str:
    """Decode the escape sequences of a JavaScript string literal body.

    Handles ``\\n``-style escapes, ``\\xHH``, ``\\uHHHH``, ``\\u{H...}``,
    legacy octal escapes, and line continuations. Surrogate pairs written as
    two ``\\u`` escapes are combined into one code point.
    """

    def _replace(match: re.Match[str]) -> str:
        seq = match.group(1)
        if seq.startswith("u{"):
            return chr(int(seq[2:-1], 16))
        if seq[0] == "u" and len(seq) == 5:
            return chr(int(seq[1:], 16))
        if seq[0] == "x" and len(seq) == 3:
            return chr(int(seq[1:], 16))
        if seq[0] in "01234567":
            return chr(int(seq, 8))
        return _SIMPLE_ESCAPES.get(seq, seq)

    decoded = _ESCAPE_RE.sub(_replace, body)
    if any("\ud800" <= ch <= "\udfff" for ch in decoded):
        decoded = decoded.encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")
    return decoded


def string_value(node: Node, source: bytes) -> str:
    """Return the decoded value of a ``string`` node."""
    return decode_js_escapes(node_text(node, source)[1:-1])


def parse_number(text: str) -> int | float:
    """Parse a JavaScript numeric literal.

    Supports decimal and exponent forms, ``0x``/``0o``/``0b`` prefixes,
    legacy octal (``017``), numeric separators (``1_000``) and BigInt
    suffixes (``10n``). Integral values are returned as ``int``.
    """
    cleaned = text.replace("_", "")
    if cleaned.endswith("n"):
        return int(cleaned[:-1], 0)
    lowered = cleaned.lower()
    if lowered.startswith(("0x", "0o", "0b")):
        return int(cleaned, 0)
    if len(cleaned) > 1 and cleaned[0] == "0" and cleaned.isdigit():
        # Legacy octal unless a digit rules it out ("019" is decimal).
        return int(cleaned, 8) if set(cleaned) <= set("01234567") else int(cleaned, 10)
    return _normalize_number(float(cleaned))


def js_to_string(value: Any) -> str:
    """Convert a value to a string the way JavaScript's ``String()`` does."""
    if value is None:
        return "undefined"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(_normalize_number(value))
    if isinstance(value, int):
        return str(value)
    if isinstance(value, list):
        return ",".join("" if item is None else js_to_string(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    if isinstance(value, JsFunction):
        return value.source
    return str(value)


def js_truthy(value: Any) -> bool:
    """JavaScript truthiness (empty containers are truthy, NaN is falsy)."""
    if isinstance(value, (list, dict, JsFunction)):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def _normalize_number(value: int | float) -> int | float:
    """Collapse integral finite floats to ``int`` (JavaScript has one number type)."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return value


class LiteralEvaluator:
    """Evaluate literal JavaScript expressions into Python values.

    Objects become ``dict`` (insertion order preserved, later duplicate
    keys overwrite earlier ones in place), arrays become ``list``, and
    numbers become ``int`` or ``float``.

    Args:
        source: The bytes the syntax tree was parsed from.
        symbols: Values for identifiers the literal may reference.
    """

    def __init__(self, source: bytes, symbols: Optional[Mapping[str, Any]] = None) -> None:
        self._source = source
        self._symbols: Mapping[str, Any] = symbols or {}
        self._dispatch: dict[str, Callable[[Node], Any]] = {
            "object": self._eval_object,
            "array": self._eval_array,
            "string": self._eval_string,
            "template_string": self._eval_template,
            "number": self._eval_number,
            "true": lambda node: True,
            "false": lambda node: False,
            "null": lambda node: None,
            "undefined": lambda node: None,
            "identifier": self._eval_identifier,
            "parenthesized_expression": self._eval_parenthesized,
            "unary_expression": self._eval_unary,
            "binary_expression": self._eval_binary,
        }
        for kind in _FUNCTION_NODES:
            self._dispatch[kind] = self._eval_function

    def evaluate(self, node: Node) -> Any:
        """Evaluate *node* and return its value.

        Raises:
            ExtractionGapError: If the expression references an unknown
                identifier or is not a supported literal form.
        """
        handler = self._dispatch.get(node.type)
        if handler is None:
            raise self._gap(
                f"Cannot evaluate {node.type.replace('_', ' ')} in option schema: "
                f"{self._text(node)}",
                node,
            )
        return handler(node)

    # ------------------------------------------------------------------ #
    # Containers
    # ------------------------------------------------------------------ #

    def _eval_object(self, node: Node) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for child in self._operands(node):
            kind = child.type
            if kind == "pair":
                key = self._property_key(child.child_by_field_name("key"))
                result[key] = self.evaluate(child.child_by_field_name("value"))
            elif kind == "shorthand_property_identifier":
                result[self._text(child)] = self._lookup(self._text(child), child)
            elif kind == "spread_element":
                spread = self.evaluate(self._operands(child)[0])
                if isinstance(spread, dict):
                    result.update(spread)
                elif spread is not None:
                    raise self._gap(
                        f"Cannot spread a non-object into an option schema: {self._text(child)}",
                        child,
                    )
            elif kind == "method_definition":
                result[self._property_key(child.child_by_field_name("name"))] = JsFunction(
                    self._text(child)
                )
            else:
                raise self._gap(
                    f"Cannot evaluate object member {self._text(child)!r}", child
                )
        return result

    def _eval_array(self, node: Node) -> list[Any]:
        result: list[Any] = []
        for child in self._operands(node):
            if child.type == "spread_element":
                spread = self.evaluate(self._operands(child)[0])
                if isinstance(spread, str):
                    result.extend(spread)
                elif isinstance(spread, list):
                    result.extend(spread)
                else:
                    raise self._gap(
                        f"Cannot spread a non-iterable into an array: {self._text(child)}",
                        child,
                    )
            else:
                result.append(self.evaluate(child))
        return result

    def _property_key(self, node: Node) -> str:
        kind = node.type
        if kind == "string":
            return string_value(node, self._source)
        if kind == "number":
            return js_to_string(parse_number(self._text(node)))
        if kind == "computed_property_name":
            return js_to_string(self.evaluate(self._operands(node)[0]))
        # property_identifier, private_property_identifier, reserved words
        return self._text(node)

    # ------------------------------------------------------------------ #
    # Scalars
    # ------------------------------------------------------------------ #

    def _eval_string(self, node: Node) -> str:
        return string_value(node, self._source)

    def _eval_template(self, node: Node) -> str:
        parts: list[str] = []
        position = node.start_byte + 1
        for child in node.named_children:
            if child.type != "template_substitution":
                continue
            parts.append(self._template_chunk(position, child.start_byte))
            parts.append(js_to_string(self.evaluate(self._operands(child)[0])))
            position = child.end_byte
        parts.append(self._template_chunk(position, node.end_byte - 1))
        return "".join(parts)

    def _template_chunk(self, start: int, end: int) -> str:
        raw = self._source[start:end].decode("utf-8").replace("\r\n", "\n")
        return decode_js_escapes(raw)

    def _eval_number(self, node: Node) -> int | float:
        return parse_number(self._text(node))

    def _eval_identifier(self, node: Node) -> Any:
        name = self._text(node)
        if name == "undefined":
            return None
        return self._lookup(name, node)

    def _eval_function(self, node: Node) -> JsFunction:
        return JsFunction(self._text(node))

    # ------------------------------------------------------------------ #
    # Operators
    # ------------------------------------------------------------------ #

    def _eval_parenthesized(self, node: Node) -> Any:
        return self.evaluate(self._operands(node)[0])

    def _eval_unary(self, node: Node) -> Any:
        operator = node.child_by_field_name("operator").type
        argument = node.child_by_field_name("argument")
        if operator == "void":
            return None
        value = self.evaluate(argument)
        if operator == "!":
            return not js_truthy(value)
        if operator == "-":
            return _normalize_number(-self._to_number(value, node))
        if operator == "+":
            return self._to_number(value, node)
        raise self._gap(f"Unsupported operator {operator!r}: {self._text(node)}", node)

    def _eval_binary(self, node: Node) -> Any:
        operator = node.child_by_field_name("operator").type
        left_node = node.child_by_field_name("left")
        right_node = node.child_by_field_name("right")

        if operator in ("||", "&&", "??"):
            left = self.evaluate(left_node)
            if operator == "||":
                return left if js_truthy(left) else self.evaluate(right_node)
            if operator == "&&":
                return self.evaluate(right_node) if js_truthy(left) else left
            return self.evaluate(right_node) if left is None else left

        if operator not in ("+", "-", "*", "/", "%", "**"):
            raise self._gap(f"Unsupported operator {operator!r}: {self._text(node)}", node)

        left = self.evaluate(left_node)
        right = self.evaluate(right_node)
        if operator == "+" and (isinstance(left, str) or isinstance(right, str)):
            return js_to_string(left) + js_to_string(right)

        a = self._to_number(left, left_node)
        b = self._to_number(right, right_node)
        try:
            if operator == "+":
                result = a + b
            elif operator == "-":
                result = a - b
            elif operator == "*":
                result = a * b
            elif operator == "/":
                result = a / b
            elif operator == "%":
                result = math.fmod(a, b)
            else:
                result = a**b
        except (ZeroDivisionError, OverflowError, ValueError) as exc:
            raise self._gap(
                f"Cannot evaluate arithmetic in option schema ({exc}): {self._text(node)}",
                node,
            ) from exc
        return _normalize_number(result)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _to_number(self, value: Any, node: Node) -> int | float:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, (int, float)):
            return value
        raise self._gap(
            f"Expected a number in option schema: {self._text(node)}", node
        )

    def _lookup(self, name: str, node: Node) -> Any:
        if name in self._symbols:
            return self._symbols[name]
        raise ExtractionGapError(
            f"Unresolved identifier '{name}' in option schema: {self._context(node)}",
            expression=self._context(node),
            name=name,
        )

    def _operands(self, node: Node) -> list[Node]:
        """Named children of *node* without comments."""
        return [child for child in node.named_children if child.type not in _SKIPPED]

    def _text(self, node: Node) -> str:
        return node_text(node, self._source)

    def _context(self, node: Node) -> str:
        """Text of the enclosing ``key: value`` pair, or of *node* itself."""
        current: Optional[Node] = node
        while current is not None:
            if current.type == "pair":
                return self._text(current)
            if current.type == "object":
                break
            current = current.parent
        return self._text(node)

    def _gap(self, message: str, node: Node) -> ExtractionGapError:
        return ExtractionGapError(message, expression=self._text(node))
