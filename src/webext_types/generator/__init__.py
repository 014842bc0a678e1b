"""TypeScript declaration generator.

Turns :class:`~webext_types.models.CommandSpec` objects into
``export interface`` blocks.

Sub-modules:

* :mod:`~webext_types.generator.naming` -- camelCase / PascalCase helpers.
* :mod:`~webext_types.generator.renderer` -- Per-option documentation,
  property name, type and optionality; assembly through a Jinja2 template.
"""

from webext_types.generator.renderer import render_declarations, render_interface

__all__ = ["render_declarations", "render_interface"]
