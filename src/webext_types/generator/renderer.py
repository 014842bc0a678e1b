"""Render extracted option schemas as TypeScript interfaces.

Each :class:`~webext_types.models.CommandSpec` becomes one
``export interface <Command>Options { ... }`` block. For every option, in
source order, the renderer decides:

* **Documentation** -- a JSDoc block when the option has a description or a
  default. Descriptions are wrapped at
  :attr:`~webext_types.models.GeneratorConfig.wrap_width` columns, breaking
  only at whitespace; ``@default`` follows after a blank comment line.
* **Property name** -- the first alias found in the preferred-alias set,
  otherwise the option key, converted to camelCase.
* **Type** -- a configured override for ``<command>/<key>`` wins verbatim;
  ``array`` becomes a string-literal union array when ``choices`` is
  declared and ``string[]`` otherwise; anything else uses the declared
  yargs type name. Non-mandatory options get ``| undefined``.
* **Optionality** -- ``?`` unless the option is mandatory or has a default.

The interface block itself is produced from the ``interface.d.ts.j2``
Jinja2 template alongside this module.
"""

from __future__ import annotations

import json
import textwrap
from collections.abc import Collection, Iterable, Mapping
from functools import cache
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from webext_types.generator.naming import camel_case, pascal_case
from webext_types.models import CommandSpec, GeneratorConfig, OptionDescriptor


TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``generator/templates/``)."""

INTERFACE_SUFFIX = "Options"

_UNTYPED = "unknown"


@cache
def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for declaration templates.

    Autoescape is off (the output is TypeScript, not HTML). Block trimming
    and lstrip keep the template readable without leaking blank lines, and
    the trailing newline is dropped so callers control blank lines between
    interfaces.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
        undefined=StrictUndefined,
    )


def render_declarations(specs: Iterable[CommandSpec], config: GeneratorConfig) -> str:
    """Render every command as an interface, in the given order.

    Interfaces are separated by exactly one blank line and the result ends
    with a single newline.
    """
    interfaces = [
        render_interface(
            spec,
            type_overrides=config.type_overrides,
            preferred_aliases=config.preferred_aliases,
            wrap_width=config.wrap_width,
        )
        for spec in specs
    ]
    return "\n\n".join(interfaces) + "\n"


def render_interface(
    spec: CommandSpec,
    type_overrides: Optional[Mapping[str, str]] = None,
    preferred_aliases: Collection[str] = (),
    wrap_width: int = 79,
) -> str:
    """Render one command as an ``export interface`` block.

    Args:
        spec: The command and its options.
        type_overrides: TypeScript types keyed by ``"<command>/<key>"``.
        preferred_aliases: Aliases to emit instead of the option key.
        wrap_width: Column at which descriptions wrap.

    Returns:
        The interface text without a trailing newline. A command with no
        options renders an empty body.
    """
    overrides = type_overrides or {}
    preferred = frozenset(preferred_aliases)

    lines: list[str] = []
    for key, option in spec.options.items():
        lines.extend(render_doc_comment(option, wrap_width))
        name = resolve_property_name(key, option, preferred)
        marker = "" if is_required(option) else "?"
        lines.append(f"{name}{marker}: {resolve_type(spec.name, key, option, overrides)}")

    template = _create_jinja_env().get_template("interface.d.ts.j2")
    return template.render(
        interface_name=f"{pascal_case(spec.name)}{INTERFACE_SUFFIX}",
        lines=[line.rstrip() for line in lines],
    )


def render_doc_comment(option: OptionDescriptor, wrap_width: int = 79) -> list[str]:
    """Return the JSDoc lines for *option*, or ``[]`` when there is nothing to say."""
    description = _description(option)
    if description is None and not option.has_default:
        return []

    lines = ["/**"]
    if description is not None:
        lines.extend(f" * {segment}" for segment in wrap_description(description, wrap_width))
    if option.has_default:
        if description is not None:
            lines.append(" *")
        lines.append(f" * @default {format_default(option.default)}")
    lines.append(" */")
    return lines


def wrap_description(text: str, width: int = 79) -> list[str]:
    """Wrap *text* into segments of at most *width* characters.

    Breaks happen only at whitespace. A single word longer than *width* is
    kept whole on its own line rather than split.
    """
    return textwrap.wrap(
        text.replace("*/", "*\\/"),
        width=width,
        break_long_words=False,
        break_on_hyphens=False,
    )


def format_default(value: Any) -> str:
    """JSON-encode a default value compactly (``["a","b"]``, ``true``, ``"x"``)."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def resolve_property_name(
    key: str, option: OptionDescriptor, preferred_aliases: Collection[str]
) -> str:
    """Camel-cased property name: first preferred alias, else the option key."""
    chosen = next((alias for alias in option.aliases if alias in preferred_aliases), key)
    return camel_case(chosen)


def resolve_type(
    command: str,
    key: str,
    option: OptionDescriptor,
    type_overrides: Mapping[str, str],
) -> str:
    """TypeScript type of the property for *option*.

    The override lookup uses the option key as declared upstream, before any
    preferred alias is applied.
    """
    override = type_overrides.get(f"{command}/{key}")
    if override is not None:
        ts_type = override
    elif option.type == "array":
        ts_type = _array_type(option.choices)
    elif option.type is None:
        ts_type = _UNTYPED
    else:
        ts_type = option.type

    if not option.is_mandatory:
        ts_type += " | undefined"
    return ts_type


def is_required(option: OptionDescriptor) -> bool:
    """A property is required when the option is mandatory or has a default."""
    return option.is_mandatory or option.has_default


def _array_type(choices: Optional[list[Any]]) -> str:
    if not choices:
        return "string[]"
    union = " | ".join(_string_literal(choice) for choice in choices)
    return f"({union})[]"


def _string_literal(value: Any) -> str:
    text = value if isinstance(value, str) else json.dumps(value, default=str)
    escaped = text.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def _description(option: OptionDescriptor) -> Optional[str]:
    if option.describe is None or not option.describe.strip():
        return None
    return option.describe
