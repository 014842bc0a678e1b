"""Locate and evaluate the option schema each subcommand registers.

Upstream registers subcommands through a chain of calls shaped like::

    program
      .command('run', 'Run the extension', commands.run, {
        target: { type: 'array', choices: [...], ... },
        ...
      })

Two structural anchors identify a registration: the callee is a property
access named ``command`` and the fourth positional argument is an object
literal. The first argument must be a string literal equal to the command
name. Nothing else about the surrounding code is assumed, which keeps the
extraction stable across upstream releases.

The public entry points are:

* :func:`load_tree` -- strip Flow types and parse the source once.
* :func:`find_option_schema` -- first matching schema node for a command.
* :func:`extract_command` -- evaluate that node into a
  :class:`~webext_types.models.CommandSpec`.
* :func:`extract_commands` -- :func:`extract_command` for each name.

A command without a registration yields ``CommandSpec(matched=False)``
with no options; deciding how loudly to report that is up to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError
from tree_sitter import Node

from webext_types.exceptions import ExtractionGapError
from webext_types.models import CommandSpec, OptionDescriptor
from webext_types.parser.flow import strip_flow_types
from webext_types.parser.literal import LiteralEvaluator, string_value
from webext_types.parser.syntax import SourceTree, node_text, parse_module, walk_preorder

logger = logging.getLogger(__name__)

_REGISTRATION_METHOD = "command"
_SCHEMA_POSITION = 3


def load_tree(text: str) -> SourceTree:
    """Strip type annotations from *text* and parse it as a JavaScript module.

    Raises:
        ParseError: If the stripped source is not valid JavaScript.
    """
    return parse_module(strip_flow_types(text))


def find_option_schema(root: Node, source: bytes, command: str) -> Optional[Node]:
    """Return the option-schema object literal registered for *command*.

    The tree is walked in pre-order and the walk stops at the first match.
    A registration is recognised when the walk reaches its argument list,
    which comes after the callee subtree; in a chain such as
    ``a.command('run', ...).command('run', ...)`` the inner (earlier) call
    therefore wins.

    Args:
        root: Root of the parsed module.
        source: Bytes the tree was parsed from.
        command: Subcommand name to look for.

    Returns:
        The ``object`` node passed as fourth argument, or ``None`` if no
        registration matches.
    """
    for node, parent in walk_preorder(root):
        if node.type != "arguments" or parent is None or parent.type != "call_expression":
            continue
        schema = _match_registration(parent, node, source, command)
        if schema is not None:
            return schema
    return None


def extract_command(
    tree: SourceTree,
    command: str,
    symbols: Optional[Mapping[str, Any]] = None,
) -> CommandSpec:
    """Recover the option descriptors *command* registers upstream.

    Args:
        tree: Parsed, type-stripped upstream module.
        command: Subcommand name.
        symbols: Values for upstream identifiers referenced by the schema.

    Returns:
        A :class:`~webext_types.models.CommandSpec` whose options follow the
        source order. ``matched`` is ``False`` (and options empty) when the
        command has no registration.

    Raises:
        ExtractionGapError: If the schema references an identifier missing
            from *symbols*, uses an expression the literal interpreter does
            not support, or declares an option that is not an object.
    """
    schema = find_option_schema(tree.root, tree.source, command)
    if schema is None:
        logger.debug("No registration found for command '%s'", command)
        return CommandSpec(name=command, matched=False)

    line = schema.start_point[0] + 1
    logger.debug("Found option schema for '%s' at line %d", command, line)
    raw = LiteralEvaluator(tree.source, symbols).evaluate(schema)

    options: dict[str, OptionDescriptor] = {}
    for key, value in raw.items():
        options[key] = _to_descriptor(command, key, value)
    return CommandSpec(name=command, options=options)


def extract_commands(
    tree: SourceTree,
    commands: Iterable[str],
    symbols: Optional[Mapping[str, Any]] = None,
) -> list[CommandSpec]:
    """Extract every command in *commands*, in the given order.

    Each command re-walks the same tree; nothing is carried over between
    commands.
    """
    return [extract_command(tree, command, symbols) for command in commands]


def _match_registration(
    call: Node, arguments: Node, source: bytes, command: str
) -> Optional[Node]:
    """Return the schema node if *call* registers *command*, else ``None``."""
    callee = call.child_by_field_name("function")
    if callee is None or callee.type != "member_expression":
        return None
    prop = callee.child_by_field_name("property")
    if (
        prop is None
        or prop.type != "property_identifier"
        or node_text(prop, source) != _REGISTRATION_METHOD
    ):
        return None

    positional = [arg for arg in arguments.named_children if arg.type != "comment"]
    if len(positional) <= _SCHEMA_POSITION:
        return None
    name = positional[0]
    if name.type != "string" or string_value(name, source) != command:
        return None
    schema = positional[_SCHEMA_POSITION]
    if schema.type != "object":
        return None
    return schema


def _to_descriptor(command: str, key: str, value: Any) -> OptionDescriptor:
    """Validate one evaluated option entry into an :class:`OptionDescriptor`."""
    if not isinstance(value, dict):
        raise ExtractionGapError(
            f"Option '{key}' of command '{command}' is not an object "
            f"(got {type(value).__name__})",
            expression=key,
        )
    try:
        return OptionDescriptor.model_validate({**value, "name": key})
    except ValidationError as exc:
        raise ExtractionGapError(
            f"Option '{key}' of command '{command}' has an unexpected shape: {exc}",
            expression=key,
        ) from exc
