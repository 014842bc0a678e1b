"""Inspect command -- show the option schemas extracted for a release.

``web-ext-types inspect <version>`` runs the same retrieval and extraction
as ``generate`` but prints a table of every option instead of declarations:
the command, the upstream key, the rendered property name, the TypeScript type, whether
the property is required, and its default. The table honours the global
``--json`` and ``--plain`` flags.
"""

from __future__ import annotations

from typing import Optional

import typer

from webext_types.commands import report_error
from webext_types.exceptions import InvalidUsageError, WebExtTypesError
from webext_types.output import get_output


def inspect_command(
    version: str = typer.Argument(..., help="web-ext release tag, e.g. 8.3.0."),
    command: Optional[str] = typer.Option(
        None, "--command", "-c", help="Only show this subcommand."
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Config file (JSON or YAML)."
    ),
    source: Optional[str] = typer.Option(
        None, "--source", help="Read program.js from a local file instead of fetching it."
    ),
) -> None:
    """List the options extracted for each subcommand.

    Example::

        web-ext-types inspect 8.3.0
        web-ext-types --json inspect 8.3.0 -c sign
    """
    from webext_types.config import resolve_config
    from webext_types.generator.renderer import (
        format_default,
        is_required,
        resolve_property_name,
        resolve_type,
    )
    from webext_types.pipeline import extract_option_specs

    try:
        if not version.strip():
            raise InvalidUsageError("Version must not be empty")
        config = resolve_config(config_path)
        commands = [command] if command else None
        specs = extract_option_specs(
            version.strip(), config, source_path=source, commands=commands
        )
    except WebExtTypesError as exc:
        report_error(exc)
        raise typer.Exit(code=exc.exit_code) from None

    preferred = frozenset(config.preferred_aliases)
    headers = ["Command", "Option", "Property", "Type", "Required", "Default"]
    rows: list[list[str]] = []
    for spec in specs:
        for key, option in spec.options.items():
            rows.append([
                spec.name,
                key,
                resolve_property_name(key, option, preferred),
                resolve_type(spec.name, key, option, config.type_overrides),
                "Yes" if is_required(option) else "",
                format_default(option.default) if option.has_default else "-",
            ])

    get_output().print_table(
        headers, rows, title=f"web-ext {version.strip()} -- Options ({len(rows)})"
    )
