"""Identifier case conversion for rendered TypeScript names.

yargs option keys are kebab-case (``overwrite-dest``), occasionally
camelCase or contain acronyms (``amoBaseURL``). Both helpers split a name
into lowercase words first:

1. Runs of capitals are collapsed to a capitalised word (``URL`` becomes
   ``Url``) so acronyms stay one word.
2. The string is split before every capital and at ``.``, ``-``, ``_``
   and whitespace.
3. Empty pieces (from leading or doubled separators) are dropped.

Example::

    >>> camel_case("firefox-binary")
    'firefoxBinary'
    >>> camel_case("amoBaseURL")
    'amoBaseUrl'
    >>> pascal_case("run")
    'Run'
"""

from __future__ import annotations

import re

_CAPITAL_RUN_RE = re.compile(r"[A-Z]+")
_WORD_SPLIT_RE = re.compile(r"(?=[A-Z])|[.\-\s_]")


def split_words(name: str) -> list[str]:
    """Split *name* into lowercase words."""
    collapsed = _CAPITAL_RUN_RE.sub(lambda m: m.group(0).capitalize(), name)
    return [word.lower() for word in _WORD_SPLIT_RE.split(collapsed) if word]


def camel_case(name: str) -> str:
    """Convert *name* to camelCase (``source-dir`` -> ``sourceDir``)."""
    words = split_words(name)
    if not words:
        return ""
    return words[0] + "".join(word[:1].upper() + word[1:] for word in words[1:])


def pascal_case(name: str) -> str:
    """Convert *name* to PascalCase (``run`` -> ``Run``)."""
    return "".join(word[:1].upper() + word[1:] for word in split_words(name))
