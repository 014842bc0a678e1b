"""Tests for webext_types.parser.loader."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from webext_types.exceptions import RetrievalError
from webext_types.models import DEFAULT_URL_TEMPLATE
from webext_types.parser.loader import build_source_url, fetch_source, load_source


def _response(url: str, status_code: int = 200, text: str = "") -> httpx.Response:
    return httpx.Response(
        status_code=status_code,
        text=text,
        request=httpx.Request("GET", url),
    )


# ---------------------------------------------------------------------------
# URL building
# ---------------------------------------------------------------------------


class TestBuildSourceUrl:
    """The version is substituted into the URL template verbatim."""

    def test_default_template(self) -> None:
        assert build_source_url("8.3.0") == (
            "https://raw.githubusercontent.com/mozilla/web-ext/refs/tags/8.3.0/src/program.js"
        )

    def test_custom_template(self) -> None:
        url = build_source_url("1.2.3", "https://mirror.example.com/{version}/program.js")
        assert url == "https://mirror.example.com/1.2.3/program.js"

    def test_version_is_not_validated(self) -> None:
        assert "not-a-version" in build_source_url("not-a-version")

    def test_every_placeholder_replaced(self) -> None:
        url = build_source_url("2.0.0", "https://x.test/{version}/{version}.js")
        assert url == "https://x.test/2.0.0/2.0.0.js"


# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------


class TestFetchSource:
    """HTTP retrieval of the upstream source."""

    def test_returns_body(self) -> None:
        url = build_source_url("8.3.0")
        with patch("webext_types.parser.loader.httpx.get") as mock_get:
            mock_get.return_value = _response(url, text="export const x = 1;\n")
            text = fetch_source("8.3.0")

        assert text == "export const x = 1;\n"
        mock_get.assert_called_once_with(url, timeout=30.0, follow_redirects=True)

    def test_passes_template_and_timeout(self) -> None:
        template = "https://mirror.example.com/{version}.js"
        with patch("webext_types.parser.loader.httpx.get") as mock_get:
            mock_get.return_value = _response("https://mirror.example.com/1.0.0.js")
            fetch_source("1.0.0", template, timeout=5)

        mock_get.assert_called_once_with(
            "https://mirror.example.com/1.0.0.js", timeout=5, follow_redirects=True
        )

    def test_not_found_raises_with_status(self) -> None:
        url = build_source_url("0.0.0")
        with patch("webext_types.parser.loader.httpx.get") as mock_get:
            mock_get.return_value = _response(url, status_code=404, text="404: Not Found")
            with pytest.raises(RetrievalError) as exc_info:
                fetch_source("0.0.0")

        assert exc_info.value.status_code == 404
        assert "HTTP 404 Not Found" in str(exc_info.value)
        assert url in str(exc_info.value)
        assert exc_info.value.exit_code == 6

    def test_server_error_raises(self) -> None:
        url = build_source_url("8.3.0")
        with patch("webext_types.parser.loader.httpx.get") as mock_get:
            mock_get.return_value = _response(url, status_code=503)
            with pytest.raises(RetrievalError, match="HTTP 503"):
                fetch_source("8.3.0")

    def test_transport_error_raises(self) -> None:
        with patch("webext_types.parser.loader.httpx.get") as mock_get:
            mock_get.side_effect = httpx.ConnectError("connection refused")
            with pytest.raises(RetrievalError) as exc_info:
                fetch_source("8.3.0")

        assert exc_info.value.status_code is None
        assert "connection refused" in str(exc_info.value)

    def test_timeout_raises(self) -> None:
        with patch("webext_types.parser.loader.httpx.get") as mock_get:
            mock_get.side_effect = httpx.ReadTimeout("timed out")
            with pytest.raises(RetrievalError, match="timed out"):
                fetch_source("8.3.0")

    def test_default_template_constant(self) -> None:
        assert "{version}" in DEFAULT_URL_TEMPLATE


# ---------------------------------------------------------------------------
# Local files
# ---------------------------------------------------------------------------


class TestLoadSource:
    """Reading a local copy of the source."""

    def test_reads_file(self, tmp_path: Path) -> None:
        source = tmp_path / "program.js"
        source.write_text("const é = 'ü';\n", encoding="utf-8")
        assert load_source(str(source)) == "const é = 'ü';\n"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(RetrievalError, match="not found"):
            load_source(str(tmp_path / "missing.js"))

    def test_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(RetrievalError):
            load_source(str(tmp_path))
