"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent state and configuration for web-ext-types:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.web-ext-types/`` on macOS and Windows. Only the data directory is
  used (crash logs). See :func:`get_data_dir`.
* **Config files** -- A JSON or YAML document deserialised into a
  :class:`~webext_types.models.GeneratorConfig`. Either named explicitly
  (``--config``) or discovered as ``./web-ext-types.{json,yaml,yml}``.
* **Precedence resolution** -- :func:`resolve_config` merges environment
  variables, the config file, and built-in defaults into the effective
  configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so that a failed run never leaves a partially
written declaration file behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from webext_types.exceptions import ConfigError
from webext_types.models import GeneratorConfig

_APP_NAME = "web-ext-types"
CONFIG_FILENAME = "web-ext-types.json"
"""Preferred name of the project config file."""

_PROJECT_CONFIG_FILENAMES = (
    CONFIG_FILENAME,
    "web-ext-types.yaml",
    "web-ext-types.yml",
)

# Mapping fields merged key-by-key over the defaults; every other field replaces.
_MERGED_FIELDS = ("symbols", "type_overrides")

ENV_URL_TEMPLATE = "WEB_EXT_TYPES_URL_TEMPLATE"
ENV_DEBUG_DIR = "WEB_EXT_TYPES_DEBUG_DIR"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/web-ext-types/`` (default
    ``~/.local/share/web-ext-types/``). On macOS/Windows:
    ``~/.web-ext-types/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up and *path* is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="\n",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config files ---


def _parse_config_content(content: str, path: Path) -> dict[str, Any]:
    """Parse a config document as JSON or YAML.

    ``.json`` files are parsed strictly as JSON. Anything else tries JSON
    first and falls back to YAML, since valid JSON is also valid YAML.

    Raises:
        ConfigError: If the content is not a JSON/YAML mapping.
    """
    if path.suffix.lower() == ".json":
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config {path}: {exc}") from exc
    else:
        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in config {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config {path} must be a JSON/YAML object (got {type(data).__name__})"
        )
    return data


def load_config_file(path: Path) -> dict[str, Any]:
    """Load a config file as a raw dict.

    Args:
        path: Path to a JSON or YAML config file.

    Returns:
        The parsed mapping (empty for an empty YAML document).

    Raises:
        ConfigError: If the file does not exist, cannot be read, or does not
            contain a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    return _parse_config_content(content, path)


def find_project_config() -> Optional[Path]:
    """Return the first ``web-ext-types.{json,yaml,yml}`` in the working directory.

    Returns:
        The config path, or ``None`` if the project has no config file.
    """
    for filename in _PROJECT_CONFIG_FILENAMES:
        path = Path.cwd() / filename
        if path.is_file():
            return path
    return None


def merge_config(base: GeneratorConfig, overrides: dict[str, Any]) -> GeneratorConfig:
    """Layer *overrides* on top of *base*.

    ``symbols`` and ``type_overrides`` are merged key-by-key so a config
    file can add one symbol without restating the defaults. All other
    fields replace the base value.

    Raises:
        ConfigError: If the merged data fails validation.
    """
    data = base.model_dump()
    for key, value in overrides.items():
        if key in _MERGED_FIELDS and isinstance(value, dict):
            data[key] = {**data.get(key, {}), **value}
        else:
            data[key] = value
    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


# --- Precedence resolution ---


def resolve_config(config_path: Optional[str] = None) -> GeneratorConfig:
    """Resolve the generator config with full precedence chain.

    Precedence (high to low):
        1. Environment variables (``WEB_EXT_TYPES_URL_TEMPLATE``,
           ``WEB_EXT_TYPES_DEBUG_DIR``)
        2. Config file: *config_path* when given, else the project config
           (``./web-ext-types.json`` / ``.yaml`` / ``.yml``) if present
        3. Defaults

    Args:
        config_path: Explicit config file from the ``--config`` flag.

    Returns:
        The effective :class:`~webext_types.models.GeneratorConfig`.

    Raises:
        ConfigError: If a config file is missing, unreadable, or invalid.
    """
    config = GeneratorConfig()

    path = Path(config_path) if config_path is not None else find_project_config()
    if path is not None:
        config = merge_config(config, load_config_file(path))

    env_overrides: dict[str, Any] = {}
    env_url = os.environ.get(ENV_URL_TEMPLATE)
    if env_url:
        env_overrides["url_template"] = env_url
    env_debug_dir = os.environ.get(ENV_DEBUG_DIR)
    if env_debug_dir:
        env_overrides["debug_dir"] = env_debug_dir
    if env_overrides:
        config = merge_config(config, env_overrides)

    return config
