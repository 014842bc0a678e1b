"""Upstream source parser -- retrieve, strip types, parse, and extract option schemas.

This sub-package is the first half of the web-ext-types pipeline: turning
the raw ``program.js`` of a web-ext release into one
:class:`~webext_types.models.CommandSpec` per subcommand that the renderer
can consume.

Typical usage::

    from webext_types.parser import extract_commands, fetch_source, load_tree

    text = fetch_source("8.3.0")
    tree = load_tree(text)
    specs = extract_commands(tree, ["run", "build", "sign"], symbols)

Sub-modules:

* :mod:`~webext_types.parser.loader` -- HTTP retrieval (and local files).
* :mod:`~webext_types.parser.syntax` -- Tree-sitter grammars, parsing and
  pre-order traversal.
* :mod:`~webext_types.parser.flow` -- Blanks out Flow type annotations.
* :mod:`~webext_types.parser.literal` -- Literal-only expression
  interpreter with a symbol table.
* :mod:`~webext_types.parser.extractor` -- Finds each command's schema and
  evaluates it into option descriptors.
"""

from webext_types.parser.extractor import extract_command, extract_commands, load_tree
from webext_types.parser.loader import fetch_source, load_source

__all__ = ["fetch_source", "load_source", "load_tree", "extract_command", "extract_commands"]
