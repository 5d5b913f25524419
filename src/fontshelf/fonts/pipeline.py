"""Orchestrate providers, the metadata cache and the asset collector.

`resolve_families` turns a `FontsConfig` into rewritten descriptors, the
rendered stylesheet and the frozen asset map. `build_fonts` additionally
writes the stylesheet and every referenced font file to an output
directory.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any

from fontshelf.core.config import FamilyConfig, FontsConfig
from fontshelf.core.exceptions import UnresolvedProviderError
from fontshelf.core.http import FontFetcher
from fontshelf.fonts.assets import AssetCollector, AssetMap, write_build_assets
from fontshelf.fonts.cache import FontCache
from fontshelf.fonts.css import generate_font_faces
from fontshelf.fonts.logging import FontPipelineLogger
from fontshelf.fonts.model import FontFace, ProviderResult
from fontshelf.fonts.providers import FontProvider, GoogleFontsProvider, LocalFontsProvider


_log = logging.getLogger(__name__)


@dataclass(slots=True)
class FamilyResult:
    """Rewritten descriptors and stylesheet for one configured family."""

    name: str
    provider: str
    faces: list[FontFace] = field(default_factory=list)
    css: str = ""


@dataclass(slots=True)
class FontsBuild:
    """Outcome of a resolution run."""

    families: list[FamilyResult] = field(default_factory=list)
    assets: AssetMap = field(default_factory=AssetMap)

    @property
    def css(self) -> str:
        return "".join(family.css for family in self.families)

    @property
    def hashes(self) -> dict[str, dict[str, str]]:
        return self.assets.hashes()


def build_providers(
    config: FontsConfig,
    *,
    fetcher: FontFetcher,
    cache: FontCache | None = None,
) -> dict[str, FontProvider]:
    """Instantiate the providers enabled in ``config``, keyed by name."""
    providers: dict[str, FontProvider] = {}
    google = config.providers.google
    if google is not None:
        providers[GoogleFontsProvider.name] = GoogleFontsProvider(
            fetcher=fetcher, cache=cache, catalog_url=google.catalog_url
        )
    local = config.providers.local
    if local is not None:
        providers[LocalFontsProvider.name] = LocalFontsProvider(
            config.resolve_path(directory) for directory in local.directories
        )
    return providers


def _select_providers(
    families: list[FamilyConfig], providers: Mapping[str, FontProvider]
) -> dict[str, FontProvider]:
    selected: dict[str, FontProvider] = {}
    for family in families:
        provider = providers.get(family.provider)
        if provider is None:
            raise UnresolvedProviderError(family.provider, family.name)
        selected.setdefault(family.provider, provider)
    return selected


async def resolve_family(
    family: FamilyConfig,
    provider: FontProvider,
    *,
    cache: FontCache,
    collector: AssetCollector,
) -> FamilyResult:
    """Resolve one family through the metadata cache and rewrite its sources.

    The cache key covers the provider name and identity, the family and the
    resolved options.
    """
    options = family.resolve_options()
    key = cache.meta_key(
        [provider.name, provider.cache_identity, family.name, options.to_dict()]
    )

    async def _produce() -> dict[str, Any]:
        result = await provider.resolve_font_faces(family.name, options)
        return result.to_dict()

    payload = await cache.cache_json(key, _produce)
    faces = collector.rewrite_all(family.name, ProviderResult.from_dict(payload).fonts)
    return FamilyResult(
        name=family.name,
        provider=provider.name,
        faces=faces,
        css=generate_font_faces(family.name, faces),
    )


async def resolve_families(
    config: FontsConfig,
    providers: Mapping[str, FontProvider],
    *,
    cache: FontCache,
    logger: FontPipelineLogger | None = None,
) -> FontsBuild:
    """Resolve every configured family in order.

    Every family must name a registered provider; otherwise the run aborts
    with :class:`UnresolvedProviderError` before any provider is set up. Only
    the providers in use are set up.
    """
    logger = logger or FontPipelineLogger()
    selected = _select_providers(config.families, providers)
    for provider in selected.values():
        _log.debug("Setting up provider %s", provider.name)
        await provider.setup()

    collector = AssetCollector(config.asset_prefix)
    build = FontsBuild()
    for family in config.families:
        provider = selected[family.provider]
        result = await resolve_family(family, provider, cache=cache, collector=collector)
        if result.faces:
            logger.debug(
                "Resolved %s via %s (%d faces)", family.name, provider.name, len(result.faces)
            )
        else:
            logger.warning("No font faces found for '%s' (provider %s).", family.name, provider.name)
        build.families.append(result)
    build.assets = collector.freeze()
    return build


@asynccontextmanager
async def _fetcher_scope(fetcher: FontFetcher | None) -> AsyncIterator[FontFetcher]:
    if fetcher is not None:
        yield fetcher
        return
    async with FontFetcher() as owned:
        yield owned


async def generate_css(
    config: FontsConfig,
    *,
    cache: FontCache | None = None,
    fetcher: FontFetcher | None = None,
    logger: FontPipelineLogger | None = None,
) -> FontsBuild:
    """Resolve ``config`` with the default providers without writing anything."""
    cache = cache or FontCache()
    async with _fetcher_scope(fetcher) as active:
        providers = build_providers(config, fetcher=active, cache=cache)
        return await resolve_families(config, providers, cache=cache, logger=logger)


async def build_fonts(
    config: FontsConfig,
    output_dir: str | Path,
    *,
    cache: FontCache | None = None,
    fetcher: FontFetcher | None = None,
    logger: FontPipelineLogger | None = None,
) -> FontsBuild:
    """Write the stylesheet and every referenced asset below ``output_dir``."""
    logger = logger or FontPipelineLogger()
    cache = cache or FontCache()
    target = Path(output_dir)
    async with _fetcher_scope(fetcher) as active:
        providers = build_providers(config, fetcher=active, cache=cache)
        build = await resolve_families(config, providers, cache=cache, logger=logger)
        target.mkdir(parents=True, exist_ok=True)
        stylesheet = target / config.css_filename
        stylesheet.write_text(build.css, encoding="utf-8")
        await write_build_assets(
            build.assets,
            target,
            cache,
            active,
            subdir=config.asset_prefix.strip("/") or "_fonts",
            logger=logger,
        )
    logger.info("Wrote %s and %d font files.", stylesheet, len(build.assets))
    return build


__all__ = [
    "FamilyResult",
    "FontsBuild",
    "build_fonts",
    "build_providers",
    "generate_css",
    "resolve_families",
    "resolve_family",
]
