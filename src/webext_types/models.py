"""Canonical Pydantic models shared across all web-ext-types modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Configuration model** -- loaded from built-in defaults, an optional config
file, and environment variables:
    :class:`GeneratorConfig`.

**Extractor output models** -- produced by the option-schema extractor and
consumed by the interface renderer:
    :class:`JsFunction`, :class:`OptionDescriptor`, and :class:`CommandSpec`.

:class:`OptionDescriptor` uses ``extra="allow"`` so that yargs keys the
renderer does not care about (``coerce``, ``requiresArg``, ``hidden``, ...)
are preserved in ``model_extra``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


DEFAULT_URL_TEMPLATE = (
    "https://raw.githubusercontent.com/mozilla/web-ext/refs/tags/{version}/src/program.js"
)
"""Location of ``program.js`` for a tagged web-ext release."""


# --- Extractor output ---


@dataclass(frozen=True)
class JsFunction:
    """Opaque stand-in for a function or arrow expression in an option schema.

    yargs schemas carry callbacks such as ``coerce``. The literal interpreter
    never executes them; it keeps the source text so the value is still
    visible in debug dumps.
    """

    source: str

    def __str__(self) -> str:
        return "[Function]"


class OptionDescriptor(BaseModel):
    """One CLI option as declared in an upstream yargs option schema.

    Field names follow the yargs option keys. ``describe`` also accepts the
    ``description`` and ``desc`` spellings yargs understands, and
    ``demandOption`` may be a string (yargs treats a message as "required").

    Example::

        OptionDescriptor.model_validate(
            {
                "name": "target",
                "type": "array",
                "choices": ["firefox-desktop", "chromium"],
                "default": "firefox-desktop",
            }
        )
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(description="Declared key of the option in the schema literal")
    type: Optional[str] = Field(
        default=None, description="yargs type: string, boolean, array, number, ..."
    )
    choices: Optional[list[Any]] = Field(
        default=None, description="Allowed values, in declaration order"
    )
    default: Any = Field(default=None, description="Default value (None if absent)")
    describe: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("describe", "description", "desc"),
        description="Human-readable description",
    )
    alias: Optional[Union[str, list[str]]] = Field(
        default=None, description="Alternate option name(s)"
    )
    demand_option: Union[bool, str] = Field(
        default=False,
        validation_alias=AliasChoices("demandOption", "demand_option"),
        description="Whether the option is mandatory",
    )

    @property
    def aliases(self) -> list[str]:
        """The ``alias`` field normalized to a list."""
        if self.alias is None:
            return []
        if isinstance(self.alias, str):
            return [self.alias]
        return list(self.alias)

    @property
    def is_mandatory(self) -> bool:
        """``True`` when ``demandOption`` is set (a message string counts)."""
        return bool(self.demand_option)

    @property
    def has_default(self) -> bool:
        """``True`` when a default other than ``null``/``undefined`` is declared."""
        return self.default is not None


class CommandSpec(BaseModel):
    """The option schema recovered for one upstream subcommand.

    ``options`` preserves the insertion order of the source object literal,
    which drives the order of the rendered properties. ``matched`` is
    ``False`` when no registration for the command was found, in which case
    ``options`` is empty.
    """

    name: str
    options: dict[str, OptionDescriptor] = Field(default_factory=dict)
    matched: bool = True


# --- Configuration ---


class GeneratorConfig(BaseModel):
    """Static configuration of a generation run.

    Built by :func:`~webext_types.config.resolve_config` from defaults, an
    optional config file, and environment variables.
    """

    url_template: str = Field(
        default=DEFAULT_URL_TEMPLATE,
        description="URL of the upstream source file; '{version}' is substituted",
    )
    commands: list[str] = Field(
        default_factory=lambda: ["run", "build", "sign"],
        description="Subcommands to render, in output order",
    )
    symbols: dict[str, Any] = Field(
        default_factory=lambda: {
            "AMO_BASE_URL": "https://addons.mozilla.org/api/v5/",
        },
        description="Literal values for upstream identifiers used in option schemas",
    )
    type_overrides: dict[str, str] = Field(
        default_factory=lambda: {"sign/channel": "'listed' | 'unlisted'"},
        description="TypeScript type per '<command>/<option key>' replacing inference",
    )
    preferred_aliases: list[str] = Field(
        default_factory=lambda: ["firefox-binary"],
        description="Aliases emitted as the property name instead of the option key",
    )
    wrap_width: int = Field(
        default=79, ge=20, description="Column at which descriptions are wrapped"
    )
    debug_dir: str = Field(
        default="debug", description="Directory for debug artifacts"
    )
    timeout: float = Field(
        default=30.0, gt=0, description="Request timeout in seconds"
    )
