from __future__ import annotations

import asyncio
import json
from pathlib import Path

from fontshelf.core.hashing import digest
from fontshelf.fonts.cache import FontCache, url_extension


def test_cache_json_invokes_producer_once(tmp_path: Path) -> None:
    cache = FontCache(tmp_path / "fonts")
    calls: list[str] = []

    async def produce() -> dict:
        calls.append("called")
        return {"fonts": [{"src": [{"url": "a.woff2"}]}]}

    key = cache.meta_key(["google", "Roboto"])
    first = asyncio.run(cache.cache_json(key, produce))
    second = asyncio.run(cache.cache_json(key, produce))

    assert calls == ["called"]
    assert first == second == {"fonts": [{"src": [{"url": "a.woff2"}]}]}
    stored = (tmp_path / "fonts" / key).read_text(encoding="utf-8")
    assert stored == json.dumps(first, indent=2)


def test_cache_binary_persists_bytes(tmp_path: Path) -> None:
    cache = FontCache(tmp_path)
    calls = 0

    async def produce() -> bytes:
        nonlocal calls
        calls += 1
        return b"wOF2"

    key = cache.data_key("https://x/a.woff2")
    assert asyncio.run(cache.cache_binary(key, produce)) == b"wOF2"
    assert asyncio.run(cache.cache_binary(key, produce)) == b"wOF2"
    assert calls == 1
    assert cache.exists(key)
    assert not list((tmp_path / "data").glob(".*"))


def test_concurrent_producers_run_once(tmp_path: Path) -> None:
    cache = FontCache(tmp_path)
    calls = 0

    async def produce() -> bytes:
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        return b"payload"

    async def run() -> list[bytes]:
        key = cache.data_key("https://x/b.ttf")
        return await asyncio.gather(*(cache.cache_binary(key, produce) for _ in range(5)))

    assert asyncio.run(run()) == [b"payload"] * 5
    assert calls == 1


def test_failed_producer_leaves_no_entry(tmp_path: Path) -> None:
    cache = FontCache(tmp_path)

    async def produce() -> dict:
        raise RuntimeError("offline")

    key = cache.meta_key({"provider": "google"})
    try:
        asyncio.run(cache.cache_json(key, produce))
    except RuntimeError:
        pass
    assert not cache.exists(key)


def test_key_layout(tmp_path: Path) -> None:
    request = ["local", "Inter", {"weights": [400]}]

    assert FontCache.meta_key(request) == f"meta/{digest(request)}.json"
    assert FontCache.data_key("https://x/a.WOFF2?v=1") == f"data/{digest('https://x/a.WOFF2?v=1')}.woff2"
    assert FontCache.data_key("https://x/font") == f"data/{digest('https://x/font')}"


def test_url_extension_handles_paths_and_urls() -> None:
    assert url_extension("a.woff2") == ".woff2"
    assert url_extension("file:///srv/fonts/Inter.TTF") == ".ttf"
    assert url_extension("https://fonts.gstatic.com/s/roboto/v30/x.woff2#frag") == ".woff2"
    assert url_extension("C:\\fonts\\Inter.otf") == ".otf"
    assert url_extension("https://example.com/") == ""


def test_default_root_follows_cache_env(tmp_path: Path) -> None:
    cache = FontCache()

    assert cache.root == tmp_path / "cache" / "fonts"
    assert not cache.root.exists()


def test_path_creates_parents(tmp_path: Path) -> None:
    cache = FontCache(tmp_path / "root")

    target = cache.path("meta", "entry.json")

    assert target == tmp_path / "root" / "meta" / "entry.json"
    assert target.parent.is_dir()


def test_size_and_clear(tmp_path: Path) -> None:
    cache = FontCache(tmp_path / "root")
    assert cache.size() == (0, 0)
    assert cache.clear() is False

    cache.path("data", "a.woff2").write_bytes(b"1234")
    cache.path("meta", "b.json").write_text("{}", encoding="utf-8")

    assert cache.size() == (2, 6)
    assert cache.clear() is True
    assert not cache.root.exists()


def test_disk_io_runs_in_worker_threads(monkeypatch, tmp_path: Path) -> None:
    cache = FontCache(tmp_path)
    offloaded: list[str] = []
    to_thread = asyncio.to_thread

    async def recording_to_thread(func, /, *args, **kwargs):
        offloaded.append(func.__name__)
        return await to_thread(func, *args, **kwargs)

    monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)

    async def produce() -> bytes:
        return b"font"

    key = cache.data_key("https://cdn.example/a.woff2")
    asyncio.run(cache.cache_binary(key, produce))
    asyncio.run(cache.cache_binary(key, produce))

    assert offloaded == ["_write", "read_bytes"]
