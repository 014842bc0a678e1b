"""Exception hierarchy for web-ext-types.

All exceptions inherit from :class:`WebExtTypesError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`webext_types.exit_codes`. Commands catch ``WebExtTypesError`` and exit
with the matching code, while unexpected exceptions reaching
:func:`webext_types.app.main` produce a crash log and exit with
:data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    WebExtTypesError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 1)
    +-- RetrievalError      (exit 6)
    +-- ParseError          (exit 7)
    +-- ExtractionGapError  (exit 8)

A command that has no matching registration upstream is *not* an error: the
extractor reports it as a warning and renders an empty interface.
"""

from __future__ import annotations

from typing import Optional

from webext_types.exit_codes import (
    EXIT_EXTRACTION_GAP,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PARSE_ERROR,
    EXIT_RETRIEVAL_ERROR,
)


class WebExtTypesError(Exception):
    """Base exception for all web-ext-types errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`webext_types.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(WebExtTypesError):
    """Raised for invalid CLI arguments (e.g. an unknown command name)."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(WebExtTypesError):
    """Raised for configuration problems (unreadable or invalid config files)."""

    exit_code = EXIT_GENERIC_FAILURE


class RetrievalError(WebExtTypesError):
    """Raised when the upstream source file cannot be fetched or read.

    Args:
        message: Human-readable error description.
        status_code: HTTP status of the failed response, or ``None`` for
            transport-level and local file failures.
    """

    exit_code = EXIT_RETRIEVAL_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(WebExtTypesError):
    """Raised when the type-stripped source is not valid JavaScript.

    Args:
        message: Human-readable error description.
        line: 1-based line of the first syntax error, when known.
        column: 1-based column of the first syntax error, when known.
    """

    exit_code = EXIT_PARSE_ERROR

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        super().__init__(message)
        self.line = line
        self.column = column


class ExtractionGapError(WebExtTypesError):
    """Raised when an option schema cannot be evaluated as a plain literal.

    This is an extraction-configuration gap rather than a transient fault:
    the upstream schema refers to a constant the symbol table does not know,
    or uses an expression the literal interpreter does not evaluate.

    Args:
        message: Human-readable error description.
        expression: Source text of the offending expression.
        name: The unresolved identifier, when the gap is a missing symbol.
    """

    exit_code = EXIT_EXTRACTION_GAP

    def __init__(
        self,
        message: str,
        expression: Optional[str] = None,
        name: Optional[str] = None,
    ):
        super().__init__(message)
        self.expression = expression
        self.name = name
