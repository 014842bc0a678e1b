"""web-ext-types -- Generate TypeScript option interfaces for web-ext.

This package reads the argument-parser setup file (``src/program.js``) of a
tagged ``mozilla/web-ext`` release, recovers the yargs option schema that
each subcommand registers, and renders matching TypeScript interfaces with
JSDoc comments.

Typical workflow::

    web-ext-types generate 8.3.0 -o index.d.ts

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Generator configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    parser: Source retrieval, type stripping, and option-schema extraction.
    generator: TypeScript interface rendering.
"""

__version__ = "0.1.0"
