"""Content-addressable cache for font metadata and binary assets.

Entries are written once and never expire: a stale entry is replaced by
changing its key, never by eviction. Keys are paths relative to the cache
root, usually built with :meth:`FontCache.meta_key` (digest of a structured
request) or :meth:`FontCache.data_key` (digest of an origin URL).
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
import json
import logging
import os
from pathlib import Path, PurePosixPath
import shutil
import tempfile
from typing import Any, TypeVar
from urllib.parse import urlparse

from fontshelf.core.hashing import digest
from fontshelf.core.cache_dir import font_cache_dir


T = TypeVar("T")

META_DIR = "meta"
DATA_DIR = "data"

_log = logging.getLogger(__name__)


def url_extension(url: str) -> str:
    """Return the lowercase file extension of a URL or path (``.woff2``), or ``""``."""
    parsed = urlparse(url)
    path = parsed.path if parsed.scheme and len(parsed.scheme) > 1 else url
    return PurePosixPath(path.replace("\\", "/")).suffix.lower()


@dataclass(slots=True)
class _KeyLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class FontCache:
    """Read-through, write-once store rooted at ``<cache dir>/fonts``.

    Producers for the same key are serialised inside one process so an
    expensive download runs once even when several coroutines ask for it.
    Separate processes racing on the same key may both produce and write; the
    last write wins.
    Disk reads and writes run in worker threads.
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = Path(root) if root is not None else font_cache_dir()
        self._locks: dict[str, _KeyLock] = {}

    def ensure(self) -> Path:
        """Ensure the cache root exists and return it."""
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def path(self, *parts: str | Path) -> Path:
        """Return a path under the cache root, creating parent directories."""
        base = self.ensure()
        target = base.joinpath(*parts)
        target.parent.mkdir(parents=True, exist_ok=True)
        return target

    @staticmethod
    def meta_key(request: Any) -> str:
        """Return the metadata key for a structured request."""
        return f"{META_DIR}/{digest(request)}.json"

    @staticmethod
    def data_key(url: str) -> str:
        """Return the binary key for an origin URL."""
        return f"{DATA_DIR}/{digest(url)}{url_extension(url)}"

    def exists(self, key: str) -> bool:
        return self.root.joinpath(key).is_file()

    @asynccontextmanager
    async def _guard(self, key: str) -> AsyncIterator[None]:
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = _KeyLock()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                self._locks.pop(key, None)

    def _write(self, target: Path, payload: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        handle, temp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
        try:
            with os.fdopen(handle, "wb") as stream:
                stream.write(payload)
            os.replace(temp_name, target)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise

    async def cache_json(self, key: str, produce: Callable[[], Awaitable[T]]) -> T:
        """Return the JSON payload stored at ``key``, producing and persisting it on a miss."""
        target = self.root / key
        async with self._guard(key):
            if target.is_file():
                _log.debug("Metadata cache hit %s", key)
                text = await asyncio.to_thread(target.read_text, encoding="utf-8")
                return json.loads(text)
            _log.debug("Metadata cache miss %s", key)
            data = await produce()
            payload = json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")
            await asyncio.to_thread(self._write, target, payload)
            return data

    async def cache_binary(self, key: str, produce: Callable[[], Awaitable[bytes]]) -> bytes:
        """Return the bytes stored at ``key``, producing and persisting them on a miss."""
        target = self.root / key
        async with self._guard(key):
            if target.is_file():
                _log.debug("Binary cache hit %s", key)
                return await asyncio.to_thread(target.read_bytes)
            _log.debug("Binary cache miss %s", key)
            data = await produce()
            await asyncio.to_thread(self._write, target, bytes(data))
            return data

    def size(self) -> tuple[int, int]:
        """Return the number of cached files and their total size in bytes."""
        if not self.root.exists():
            return 0, 0
        count = 0
        total = 0
        for entry in self.root.rglob("*"):
            if entry.is_file():
                count += 1
                total += entry.stat().st_size
        return count, total

    def clear(self) -> bool:
        """Remove every cached entry. Return ``True`` when something was deleted."""
        if not self.root.exists():
            return False
        shutil.rmtree(self.root)
        return True


__all__ = ["DATA_DIR", "META_DIR", "FontCache", "url_extension"]
