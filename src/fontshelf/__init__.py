"""Resolve web font families into self-hosted ``@font-face`` stylesheets."""

from __future__ import annotations

from fontshelf.core.cache_dir import cache_root, cache_root_context
from fontshelf.core.config import FamilyConfig, FontsConfig, load_config
from fontshelf.core.exceptions import (
    ConfigError,
    FetchError,
    FontshelfError,
    UnknownFamilyError,
    UnresolvedProviderError,
)
from fontshelf.fonts import (
    AssetCollector,
    AssetMap,
    FontAssetServer,
    FontCache,
    FontFace,
    FontsBuild,
    LocalSource,
    RemoteSource,
    build_fonts,
    extract_font_faces,
    generate_css,
    generate_font_faces,
    resolve_families,
)
from fontshelf.version import get_version


__version__ = get_version()


__all__ = [
    "AssetCollector",
    "AssetMap",
    "ConfigError",
    "FamilyConfig",
    "FetchError",
    "FontAssetServer",
    "FontCache",
    "FontFace",
    "FontsBuild",
    "FontsConfig",
    "FontshelfError",
    "LocalSource",
    "RemoteSource",
    "UnknownFamilyError",
    "UnresolvedProviderError",
    "__version__",
    "build_fonts",
    "cache_root",
    "cache_root_context",
    "extract_font_faces",
    "generate_css",
    "generate_font_faces",
    "load_config",
    "resolve_families",
]
