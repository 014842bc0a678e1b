"""Shared test fixtures for web-ext-types.

Provides reusable fixtures for the upstream source fixture, isolated
config environments, output state, mocked HTTP fetches, and running CLI
commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from webext_types.models import GeneratorConfig
from webext_types.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Upstream source fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def program_js_path() -> Path:
    """Path of the Flow-annotated ``program.js`` fixture."""
    return FIXTURES_DIR / "program.js"


@pytest.fixture
def program_js(program_js_path: Path) -> str:
    """Text of the Flow-annotated ``program.js`` fixture."""
    return program_js_path.read_text(encoding="utf-8")


@pytest.fixture
def default_config() -> GeneratorConfig:
    """Built-in generator defaults."""
    return GeneratorConfig()


# ---------------------------------------------------------------------------
# HTTP mocking
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_fetch(monkeypatch: pytest.MonkeyPatch) -> Callable[..., list[str]]:
    """Patch ``httpx.get`` to answer with a canned response.

    Call the fixture with the response body (and optionally a status code);
    it returns the list that records every requested URL.
    """

    def _install(body: str, status_code: int = 200) -> list[str]:
        requested: list[str] = []

        def _fake_get(url: str, **kwargs) -> httpx.Response:
            requested.append(url)
            return httpx.Response(
                status_code=status_code,
                text=body,
                request=httpx.Request("GET", url),
            )

        monkeypatch.setattr("webext_types.parser.loader.httpx.get", _fake_get)
        return requested

    return _install


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_DATA_HOME to a subdirectory of tmp_path so that crash logs
    never touch the real user directories, clears all WEB_EXT_TYPES_*
    environment variables, and changes the working directory to tmp_path
    (so no project config is picked up and debug artifacts land there).

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["WEB_EXT_TYPES_URL_TEMPLATE", "WEB_EXT_TYPES_DEBUG_DIR"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
