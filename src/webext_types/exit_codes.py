"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~webext_types.exceptions.WebExtTypesError` subclass.
Release scripts that drive the generator can inspect the exit code to tell a
missing release tag apart from an upstream schema the extractor cannot read.

Example::

    $ web-ext-types generate 99.0.0
    $ echo $?
    6   # EXIT_RETRIEVAL_ERROR -- the tag does not exist upstream
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_RETRIEVAL_ERROR = 6
"""The upstream source file could not be retrieved."""

EXIT_PARSE_ERROR = 7
"""The upstream source could not be parsed into a syntax tree."""

EXIT_EXTRACTION_GAP = 8
"""An option schema referenced a name or expression the extractor cannot resolve."""
