from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import pytest

from fontshelf.core.exceptions import FetchError
from fontshelf.core.http import FontFetcher, local_path


def _fetcher(handler) -> FontFetcher:
    return FontFetcher(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def test_fetch_json_strips_anti_xssi_prefix() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(200, text=')]}\'\n{"ok": true}'))

    assert asyncio.run(fetcher.fetch_json("https://example.com/data")) == {"ok": True}


def test_fetch_text_forwards_headers() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers["User-Agent"])
        return httpx.Response(200, text="body")

    text = asyncio.run(_fetcher(handler).fetch_text("https://x/css", headers={"User-Agent": "ua"}))

    assert text == "body"
    assert seen == ["ua"]


def test_http_errors_raise_fetch_error() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(503))

    with pytest.raises(FetchError) as excinfo:
        asyncio.run(fetcher.fetch_bytes("https://x/a.woff2"))

    assert excinfo.value.url == "https://x/a.woff2"
    assert excinfo.value.status_code == 503
    assert "HTTP 503" in str(excinfo.value)


def test_transport_errors_raise_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError) as excinfo:
        asyncio.run(_fetcher(handler).fetch_bytes("https://x/a.woff2"))

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
    assert str(excinfo.value).endswith("connection refused")


def test_invalid_json_raises_fetch_error() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(FetchError, match="invalid JSON"):
        asyncio.run(fetcher.fetch_json("https://x/catalog"))


def test_local_files_are_read_from_disk(tmp_path: Path) -> None:
    font = tmp_path / "Font.ttf"
    font.write_bytes(b"ttf")
    fetcher = FontFetcher()

    assert asyncio.run(fetcher.fetch_bytes(font.as_uri())) == b"ttf"
    assert asyncio.run(fetcher.fetch_bytes(str(font))) == b"ttf"
    with pytest.raises(FetchError):
        asyncio.run(fetcher.fetch_bytes((tmp_path / "missing.ttf").as_uri()))


def test_local_path_detection(tmp_path: Path) -> None:
    assert local_path(tmp_path.as_uri()) == tmp_path
    assert local_path("fonts/a.woff2") == Path("fonts/a.woff2")
    assert local_path("https://x/a.woff2") is None
    assert local_path("data:font/woff2;base64,AAAA") is None
