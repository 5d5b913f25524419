"""Web font resolution façade.

Architecture
: Providers (`GoogleFontsProvider`, `LocalFontsProvider`) answer a family
  request with `FontFace` descriptors, usually by fetching a stylesheet and
  handing it to `extract_font_faces`, which merges duplicate rules and orders
  sources by format preference.
: `FontCache` memoises provider answers under ``meta/`` and downloaded font
  files under ``data/`` so repeated builds never hit the network twice.
: `AssetCollector` rewrites remote sources to ``/_fonts/{hash}{ext}`` while
  `FontAssetServer` and `write_build_assets` materialise those files.
: `resolve_families`/`build_fonts` chain the above and render the final
  stylesheet with `generate_font_faces`.
"""

from fontshelf.fonts.assets import (
    AssetCollector,
    AssetMap,
    AssetRecord,
    FontAssetServer,
    FontResponse,
    prefetch_assets,
    write_build_assets,
)
from fontshelf.fonts.cache import FontCache
from fontshelf.fonts.css import (
    add_local_fallbacks,
    extract_font_faces,
    generate_font_face,
    generate_font_faces,
    merge_font_faces,
)
from fontshelf.fonts.logging import FontPipelineLogger
from fontshelf.fonts.model import (
    FontFace,
    FontSource,
    LocalSource,
    ProviderResult,
    RemoteSource,
    ResolveOptions,
)
from fontshelf.fonts.pipeline import (
    FamilyResult,
    FontsBuild,
    build_fonts,
    build_providers,
    generate_css,
    resolve_families,
)
from fontshelf.fonts.providers import FontProvider, GoogleFontsProvider, LocalFontsProvider


__all__ = [
    "AssetCollector",
    "AssetMap",
    "AssetRecord",
    "FamilyResult",
    "FontAssetServer",
    "FontCache",
    "FontFace",
    "FontPipelineLogger",
    "FontProvider",
    "FontResponse",
    "FontSource",
    "FontsBuild",
    "GoogleFontsProvider",
    "LocalFontsProvider",
    "LocalSource",
    "ProviderResult",
    "RemoteSource",
    "ResolveOptions",
    "add_local_fallbacks",
    "build_fonts",
    "build_providers",
    "extract_font_faces",
    "generate_css",
    "generate_font_face",
    "generate_font_faces",
    "merge_font_faces",
    "prefetch_assets",
    "resolve_families",
    "write_build_assets",
]
