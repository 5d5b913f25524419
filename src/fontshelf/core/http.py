"""Async fetch helpers with cross-platform TLS guidance."""

from __future__ import annotations

from collections.abc import Mapping
import json
import logging
from pathlib import Path
import ssl
from typing import Any
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx

from fontshelf.core.exceptions import FetchError, TLSCertificateError
from fontshelf.version import get_version


DEFAULT_TIMEOUT = 30.0

_log = logging.getLogger(__name__)


def _tls_help(url: str) -> str:
    return (
        "TLS certificate verification failed while downloading "
        f"'{url}'. On macOS run the Python 'Install Certificates.command' "
        "(from the python.org installer). On Windows run 'py -m pip install --upgrade certifi'. "
        "On Linux install your 'ca-certificates' package (apt/yum/apk). "
        "Also check system date/time and any proxy or corporate SSL inspection."
    )


def _ssl_context() -> ssl.SSLContext:
    try:
        import certifi  # type: ignore[import]
    except ImportError:
        return ssl.create_default_context()
    return ssl.create_default_context(cafile=certifi.where())


def _is_cert_error(error: BaseException) -> bool:
    visited: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in visited:
        if isinstance(current, ssl.SSLCertVerificationError):
            return True
        visited.add(id(current))
        current = current.__cause__ or current.__context__
    return False


def local_path(url: str) -> Path | None:
    """Return the filesystem path for ``file://`` URLs and plain paths, else ``None``."""
    parsed = urlparse(url)
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    if parsed.scheme in {"http", "https"}:
        return None
    # Windows drive letters parse as a one-letter scheme.
    if not parsed.scheme or len(parsed.scheme) == 1:
        return Path(url)
    return None


class FontFetcher:
    """Read font assets and catalogs over HTTP(S) or from the local filesystem.

    The fetcher owns its :class:`httpx.AsyncClient` unless one is injected,
    in which case closing the client is left to the caller.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self.timeout = timeout
        self.headers = {"User-Agent": f"fontshelf/{get_version()}", **dict(headers or {})}

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                verify=_ssl_context(),
                headers=self.headers,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> FontFetcher:
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.aclose()

    async def _request(self, url: str, headers: Mapping[str, str] | None) -> httpx.Response:
        try:
            response = await self.client.get(url, headers=dict(headers or {}))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(url, status_code=exc.response.status_code) from exc
        except httpx.HTTPError as exc:
            if _is_cert_error(exc):
                raise TLSCertificateError(url, reason=_tls_help(url)) from exc
            raise FetchError(url, reason=str(exc) or type(exc).__name__) from exc
        return response

    async def fetch_bytes(self, url: str, *, headers: Mapping[str, str] | None = None) -> bytes:
        """Return the raw payload stored at ``url``."""
        path = local_path(url)
        if path is not None:
            _log.debug("Reading local font asset %s", path)
            try:
                return path.read_bytes()
            except OSError as exc:
                raise FetchError(url, reason=exc.strerror or str(exc)) from exc
        _log.debug("Downloading %s", url)
        response = await self._request(url, headers)
        return response.content

    async def fetch_text(self, url: str, *, headers: Mapping[str, str] | None = None) -> str:
        """Return the decoded text payload stored at ``url``."""
        path = local_path(url)
        if path is not None:
            try:
                return path.read_text(encoding="utf-8")
            except OSError as exc:
                raise FetchError(url, reason=exc.strerror or str(exc)) from exc
        response = await self._request(url, headers)
        return response.text

    async def fetch_json(self, url: str, *, headers: Mapping[str, str] | None = None) -> Any:
        """Return the JSON document stored at ``url``.

        Anti-XSSI prefixes such as ``)]}'`` are stripped before decoding.
        """
        text = await self.fetch_text(url, headers=headers)
        if text.startswith(")]}'"):
            text = text[4:]
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FetchError(url, reason=f"invalid JSON payload ({exc.msg})") from exc


__all__ = ["DEFAULT_TIMEOUT", "FontFetcher", "local_path"]
