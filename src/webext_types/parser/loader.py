"""Retrieve the upstream ``program.js`` for a release tag.

The file is fetched once per run from a URL built by substituting the
version into :attr:`~webext_types.models.GeneratorConfig.url_template`.
There is no retry: a failed fetch aborts the run and the release script
that invoked the generator decides whether to run it again.

The public functions are:

* :func:`build_source_url` -- Substitute a version into the URL template.
* :func:`fetch_source` -- Download the file for a version.
* :func:`load_source` -- Read a local copy instead (offline runs, tests).
"""

from __future__ import annotations

from pathlib import Path

import httpx

from webext_types.exceptions import RetrievalError
from webext_types.models import DEFAULT_URL_TEMPLATE


def build_source_url(version: str, url_template: str = DEFAULT_URL_TEMPLATE) -> str:
    """Return the source URL for *version*.

    The version is substituted verbatim for every ``{version}`` placeholder;
    its format is not validated.
    """
    return url_template.replace("{version}", version)


def fetch_source(
    version: str,
    url_template: str = DEFAULT_URL_TEMPLATE,
    timeout: float = 30.0,
) -> str:
    """Download the upstream source file for a tagged release.

    Args:
        version: Release tag, e.g. ``"8.3.0"``.
        url_template: URL with a ``{version}`` placeholder.
        timeout: Request timeout in seconds.

    Returns:
        The exact text of the file at that tag.

    Raises:
        RetrievalError: If the server answers with a non-success status
            (the status code and reason are included) or the request fails
            at the transport level.
    """
    url = build_source_url(version, url_template)
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        reason = exc.response.reason_phrase
        raise RetrievalError(
            f"Failed to fetch {url}: HTTP {status} {reason}".rstrip(),
            status_code=status,
        ) from exc
    except httpx.RequestError as exc:
        raise RetrievalError(f"Failed to fetch {url}: {exc}") from exc

    return response.text


def load_source(path: str) -> str:
    """Read the upstream source from a local file.

    Args:
        path: Path to a copy of ``program.js``.

    Returns:
        The file's text.

    Raises:
        RetrievalError: If the file does not exist or cannot be read.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise RetrievalError(f"Source file not found: {path}")
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RetrievalError(f"Failed to read source file {path}: {exc}") from exc
