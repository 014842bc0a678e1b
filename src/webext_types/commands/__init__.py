"""Built-in CLI commands for web-ext-types.

* :mod:`~webext_types.commands.generate` -- ``web-ext-types generate``
* :mod:`~webext_types.commands.inspect` -- ``web-ext-types inspect``

Both commands translate :class:`~webext_types.exceptions.WebExtTypesError`
into a stderr message (see :func:`report_error`) and a ``typer.Exit`` with
the error's exit code.
"""

from __future__ import annotations

import traceback

from webext_types.config import CONFIG_FILENAME
from webext_types.exceptions import ExtractionGapError, ParseError, WebExtTypesError
from webext_types.output import debug, error, get_output, suggest


def report_error(exc: WebExtTypesError) -> None:
    """Print *exc* to stderr with a next-step hint where one applies.

    With ``--verbose`` the traceback is printed as debug output as well.
    """
    error(str(exc))
    if isinstance(exc, ExtractionGapError):
        if exc.name is not None:
            suggest(f"Add '{exc.name}' under \"symbols\" in {CONFIG_FILENAME}")
        else:
            suggest("Re-run with --debug and inspect the dumped syntax tree")
    elif isinstance(exc, ParseError):
        suggest("Re-run with --debug and inspect web-ext.stripped.js")
    if get_output().is_verbose:
        debug("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
