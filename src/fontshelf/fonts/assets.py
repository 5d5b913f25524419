"""Rewrite font sources to content-addressed URLs and materialise the assets.

`AssetCollector` walks resolved descriptors, replaces every remote source by a
``/_fonts/{hash}{ext}`` reference and records where the bytes come from. Once
resolution is over, `AssetCollector.freeze` hands an immutable `AssetMap` to
the serving (`FontAssetServer`) and build (`write_build_assets`) stages.
Hashes are digests of the origin URL string, so two URLs serving identical
bytes remain two assets while one URL shared by several families is stored
once.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Iterator, Mapping
import dataclasses
from dataclasses import dataclass
import logging
from pathlib import Path, PurePosixPath
from types import MappingProxyType

from fontshelf.core.hashing import digest
from fontshelf.core.http import FontFetcher
from fontshelf.fonts.cache import FontCache, url_extension
from fontshelf.fonts.logging import FontPipelineLogger
from fontshelf.fonts.model import FontFace, FontSource, LocalSource


ASSET_PREFIX = "/_fonts"
ONE_YEAR_IN_SECONDS = 60 * 60 * 24 * 365
CACHE_CONTROL = f"max-age={ONE_YEAR_IN_SECONDS}"

CONTENT_TYPES: dict[str, str] = {
    ".woff2": "font/woff2",
    ".woff": "font/woff",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    ".eot": "application/vnd.ms-fontobject",
    ".svg": "image/svg+xml",
}

_log = logging.getLogger(__name__)


def content_type(extension: str) -> str:
    return CONTENT_TYPES.get(extension.lower(), "application/octet-stream")


@dataclass(frozen=True, slots=True)
class AssetRecord:
    """One distinct font byte stream, identified by the digest of its origin URL."""

    hash: str
    origin_url: str
    family: str
    extension: str = ""

    @property
    def filename(self) -> str:
        return f"{self.hash}{self.extension}"


class AssetMap(Mapping[str, AssetRecord]):
    """Read-only ``hash -> AssetRecord`` mapping consumed by serving and build."""

    def __init__(self, records: Mapping[str, AssetRecord] | None = None) -> None:
        self._records = MappingProxyType(dict(records or {}))

    def __getitem__(self, key: str) -> AssetRecord:
        return self._records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def lookup(self, name: str) -> AssetRecord | None:
        """Return the record for ``{hash}`` or ``{hash}{ext}``, if known."""
        name = name.strip("/")
        record = self._records.get(name)
        if record is not None:
            return record
        stem = PurePosixPath(name).stem
        record = self._records.get(stem)
        if record is not None and record.filename == name:
            return record
        return None

    def hashes(self) -> dict[str, dict[str, str]]:
        """Return a JSON-friendly view of the map for host integrations."""
        return {
            key: {"family": record.family, "url": record.origin_url}
            for key, record in self._records.items()
        }


class AssetCollector:
    """Accumulate asset records while rewriting descriptors.

    The first family referencing a URL owns the record; later references
    reuse it.
    """

    def __init__(self, prefix: str = ASSET_PREFIX) -> None:
        self.prefix = prefix.rstrip("/")
        self._records: dict[str, AssetRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def record(self, family: str, url: str) -> AssetRecord:
        key = digest(url)
        existing = self._records.get(key)
        if existing is not None:
            return existing
        record = AssetRecord(hash=key, origin_url=url, family=family, extension=url_extension(url))
        self._records[key] = record
        return record

    def rewrite_source(self, family: str, source: FontSource) -> FontSource:
        if isinstance(source, LocalSource):
            return source
        record = self.record(family, source.origin)
        return dataclasses.replace(
            source,
            url=f"{self.prefix}/{record.filename}",
            original_url=record.origin_url,
        )

    def rewrite(self, family: str, face: FontFace) -> FontFace:
        """Return a copy of ``face`` whose remote sources point at served assets."""
        return dataclasses.replace(
            face, src=[self.rewrite_source(family, source) for source in face.src]
        )

    def rewrite_all(self, family: str, faces: Iterable[FontFace]) -> list[FontFace]:
        return [self.rewrite(family, face) for face in faces]

    def freeze(self) -> AssetMap:
        return AssetMap(self._records)


async def load_asset(record: AssetRecord, cache: FontCache, fetcher: FontFetcher) -> bytes:
    """Return the asset bytes, downloading them into the binary cache on a miss."""

    async def _produce() -> bytes:
        return await fetcher.fetch_bytes(record.origin_url)

    return await cache.cache_binary(cache.data_key(record.origin_url), _produce)


@dataclass(frozen=True, slots=True)
class FontResponse:
    status: int
    headers: dict[str, str]
    body: bytes


class FontAssetServer:
    """Answer ``{prefix}/{hash}{ext}`` requests from the asset map.

    :meth:`respond` returns ``None`` for unknown paths so the host can hand the
    request to its next handler.
    """

    def __init__(
        self,
        assets: AssetMap,
        cache: FontCache,
        fetcher: FontFetcher,
        *,
        prefix: str = ASSET_PREFIX,
    ) -> None:
        self.assets = assets
        self.cache = cache
        self.fetcher = fetcher
        self.prefix = prefix.rstrip("/")

    def _asset_name(self, path: str) -> str | None:
        path = path.split("?", 1)[0].split("#", 1)[0]
        if self.prefix:
            if path == self.prefix or not path.startswith(f"{self.prefix}/"):
                return None
            path = path[len(self.prefix) + 1 :]
        return path.strip("/") or None

    async def respond(self, path: str) -> FontResponse | None:
        name = self._asset_name(path)
        if name is None:
            return None
        record = self.assets.lookup(name)
        if record is None:
            return None
        body = await load_asset(record, self.cache, self.fetcher)
        headers = {
            "Cache-Control": CACHE_CONTROL,
            "Content-Type": content_type(record.extension),
            "Content-Length": str(len(body)),
        }
        return FontResponse(status=200, headers=headers, body=body)


async def prefetch_assets(
    assets: AssetMap,
    cache: FontCache,
    fetcher: FontFetcher,
    *,
    logger: FontPipelineLogger | None = None,
) -> int:
    """Warm the binary cache with every asset. Return the number of assets."""
    logger = logger or FontPipelineLogger()
    with logger.progress("Fetching fonts", total=len(assets)) as advance:
        for record in assets.values():
            await load_asset(record, cache, fetcher)
            advance(1)
    return len(assets)


async def write_build_assets(
    assets: AssetMap,
    output_dir: str | Path,
    cache: FontCache,
    fetcher: FontFetcher,
    *,
    subdir: str = ASSET_PREFIX.strip("/"),
    logger: FontPipelineLogger | None = None,
) -> list[Path]:
    """Write each asset once to ``{output_dir}/{subdir}/{hash}{ext}``."""
    logger = logger or FontPipelineLogger()
    target_dir = Path(output_dir) / subdir
    target_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    with logger.progress("Writing fonts", total=len(assets)) as advance:
        for record in assets.values():
            destination = target_dir / record.filename
            payload = await load_asset(record, cache, fetcher)
            await asyncio.to_thread(destination.write_bytes, payload)
            _log.debug("Wrote %s (%s)", destination, record.origin_url)
            written.append(destination)
            advance(1)
    return written


__all__ = [
    "ASSET_PREFIX",
    "CACHE_CONTROL",
    "CONTENT_TYPES",
    "ONE_YEAR_IN_SECONDS",
    "AssetCollector",
    "AssetMap",
    "AssetRecord",
    "FontAssetServer",
    "FontResponse",
    "content_type",
    "load_asset",
    "prefetch_assets",
    "write_build_assets",
]
