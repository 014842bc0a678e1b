"""End-to-end generation run: retrieve, parse, extract, render.

Both CLI commands go through :func:`extract_option_specs`; ``generate``
then renders the result with :func:`generate_declarations`. Each step
runs once and in order, and any error aborts the run before anything is
written to the output path.

Debug artifacts (when requested) are written under
:attr:`~webext_types.models.GeneratorConfig.debug_dir` as soon as each one
is available, so a run that fails during parsing still leaves the
original and stripped sources behind for inspection.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from webext_types.config import atomic_write
from webext_types.generator import render_declarations
from webext_types.models import CommandSpec, GeneratorConfig
from webext_types.output import debug, progress, warning
from webext_types.parser import extract_commands, fetch_source, load_source
from webext_types.parser.flow import strip_flow_types
from webext_types.parser.syntax import dump_tree, parse_module

logger = logging.getLogger(__name__)

ORIGINAL_ARTIFACT = "web-ext.original.js"
STRIPPED_ARTIFACT = "web-ext.stripped.js"
AST_ARTIFACT = "web-ext.ast.json"


def write_debug_file(config: GeneratorConfig, filename: str, content: str) -> Path:
    """Write one debug artifact under the configured debug directory.

    The directory is created if it does not exist.

    Returns:
        Path of the written file.
    """
    path = Path(config.debug_dir) / filename
    atomic_write(path, content)
    debug(f"Wrote {path}")
    return path


def extract_option_specs(
    version: str,
    config: GeneratorConfig,
    debug_artifacts: bool = False,
    source_path: Optional[str] = None,
    commands: Optional[list[str]] = None,
) -> list[CommandSpec]:
    """Retrieve the upstream source for *version* and extract option schemas.

    Args:
        version: Release tag of the upstream project.
        config: Effective generator configuration.
        debug_artifacts: Write the original source, the type-stripped
            source and a syntax tree dump under ``config.debug_dir``.
        source_path: Read the source from this local file instead of
            fetching it.
        commands: Commands to extract. Defaults to ``config.commands``.

    Returns:
        One :class:`~webext_types.models.CommandSpec` per command, in order.
        Commands without an upstream registration are returned with
        ``matched=False`` after a warning.

    Raises:
        RetrievalError: If the source cannot be fetched or read.
        ParseError: If the stripped source is not valid JavaScript.
        ExtractionGapError: If a schema cannot be evaluated as a literal.
    """
    if source_path is not None:
        progress(f"Reading {source_path}")
        text = load_source(source_path)
    else:
        progress(f"Fetching web-ext {version} source")
        text = fetch_source(version, config.url_template, config.timeout)
    logger.debug("Retrieved %d characters of source", len(text))

    if debug_artifacts:
        write_debug_file(config, ORIGINAL_ARTIFACT, text)

    stripped = strip_flow_types(text)
    if debug_artifacts:
        write_debug_file(config, STRIPPED_ARTIFACT, stripped)

    tree = parse_module(stripped)
    if debug_artifacts:
        dump = json.dumps(dump_tree(tree.root, tree.source), indent=2, ensure_ascii=False)
        write_debug_file(config, AST_ARTIFACT, dump + "\n")

    specs = extract_commands(tree, commands or config.commands, config.symbols)
    for spec in specs:
        if not spec.matched:
            warning(
                f"No option schema found for command '{spec.name}'; "
                "rendering an empty interface"
            )
        else:
            debug(f"Command '{spec.name}': {len(spec.options)} option(s)")
    return specs


def generate_declarations(
    version: str,
    config: GeneratorConfig,
    debug_artifacts: bool = False,
    source_path: Optional[str] = None,
) -> str:
    """Run the full pipeline and return the declaration file content."""
    specs = extract_option_specs(
        version, config, debug_artifacts=debug_artifacts, source_path=source_path
    )
    return render_declarations(specs, config)
