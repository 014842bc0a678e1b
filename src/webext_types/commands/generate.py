"""Generate command -- write TypeScript declarations for a web-ext release.

``web-ext-types generate <version>`` fetches the release's ``program.js``,
extracts the option schema of every configured subcommand, and renders one
``export interface`` per command. The declarations go to stdout, or to the
file given with ``--output``; the file is written atomically and only after
rendering succeeded, so a failed run never leaves a partial file behind.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from webext_types.commands import report_error
from webext_types.exceptions import InvalidUsageError, WebExtTypesError
from webext_types.output import print_data, success


def generate_command(
    version: str = typer.Argument(..., help="web-ext release tag, e.g. 8.3.0."),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write declarations to this file instead of stdout."
    ),
    debug_artifacts: bool = typer.Option(
        False, "--debug", "-d", help="Write intermediate artifacts to the debug directory."
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Config file (JSON or YAML)."
    ),
    source: Optional[str] = typer.Option(
        None, "--source", help="Read program.js from a local file instead of fetching it."
    ),
) -> None:
    """Generate TypeScript declarations for web-ext command options.

    Args:
        version: Upstream release tag substituted into the source URL.
        output: Destination file. Parent directories are created.
        debug_artifacts: Dump the original source, the type-stripped source
            and the syntax tree under the configured debug directory.
        config_path: Explicit config file; overrides the project config.
        source: Local copy of ``program.js``.

    Example::

        web-ext-types generate 8.3.0 -o src/web-ext.d.ts
        web-ext-types generate 8.3.0 --debug > web-ext.d.ts
    """
    from webext_types.config import atomic_write, resolve_config
    from webext_types.pipeline import generate_declarations

    try:
        if not version.strip():
            raise InvalidUsageError("Version must not be empty")
        config = resolve_config(config_path)
        content = generate_declarations(
            version.strip(),
            config,
            debug_artifacts=debug_artifacts,
            source_path=source,
        )
        if output is None:
            print_data(content)
        else:
            atomic_write(Path(output), content)
            success(f"Wrote {output}")
    except WebExtTypesError as exc:
        report_error(exc)
        raise typer.Exit(code=exc.exit_code) from None
