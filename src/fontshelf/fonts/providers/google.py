"""Provider backed by the Google Fonts catalog and CSS2 API."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any
from urllib.parse import quote_plus

from fontshelf.core.exceptions import UnknownFamilyError
from fontshelf.core.http import FontFetcher
from fontshelf.fonts.cache import FontCache
from fontshelf.fonts.css import add_local_fallbacks, extract_font_faces
from fontshelf.fonts.model import ProviderResult, ResolveOptions


CATALOG_URL = "https://fonts.google.com/metadata/fonts"
CSS2_URL = "https://fonts.googleapis.com/css2"

STYLE_FLAGS: dict[str, str] = {
    "italic": "1",
    "oblique": "1",
    "normal": "0",
}

# The CSS2 API picks the font format from the user agent.
USER_AGENTS: dict[str, str] = {
    "woff2": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
    ),
    "ttf": (
        "Mozilla/5.0 (Windows NT 6.1) AppleWebKit/534.54.16 "
        "(KHTML, like Gecko) Version/5.1.4 Safari/534.54.16"
    ),
}

_log = logging.getLogger(__name__)


def _format_axis_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class GoogleFontsProvider:
    """Resolve families through ``fonts.googleapis.com``.

    The family catalog is fetched once during :meth:`setup` and stored in the
    metadata cache when one is provided.
    """

    name = "google"

    def __init__(
        self,
        *,
        fetcher: FontFetcher,
        cache: FontCache | None = None,
        catalog_url: str | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.cache = cache
        self.catalog_url = catalog_url or CATALOG_URL
        self._families: dict[str, Mapping[str, Any]] | None = None

    @property
    def cache_identity(self) -> dict[str, str]:
        return {"catalog": self.catalog_url, "css": CSS2_URL}

    async def _load_catalog(self) -> Any:
        return await self.fetcher.fetch_json(self.catalog_url)

    async def setup(self) -> None:
        if self.cache is not None:
            key = self.cache.meta_key({"provider": self.name, "catalog": self.catalog_url})
            payload = await self.cache.cache_json(key, self._load_catalog)
        else:
            payload = await self._load_catalog()
        entries = payload.get("familyMetadataList", []) if isinstance(payload, Mapping) else []
        self._families = {
            entry["family"]: entry
            for entry in entries
            if isinstance(entry, Mapping) and "family" in entry
        }
        _log.debug("Loaded %d families from %s", len(self._families), self.catalog_url)

    def _weights(self, font: Mapping[str, Any], options: ResolveOptions) -> list[str]:
        for axis in font.get("axes") or []:
            if axis.get("tag") == "wght":
                low = _format_axis_value(axis.get("min"))
                high = _format_axis_value(axis.get("max"))
                return [f"{low}..{high}"]
        available = font.get("fonts") or {}
        return [str(weight) for weight in options.weights if str(weight) in available]

    def css_url(self, family: str, variants: list[str], subsets: list[str]) -> str:
        return (
            f"{CSS2_URL}?family={quote_plus(family)}:ital,wght@{';'.join(variants)}"
            f"&subset={','.join(subsets)}"
        )

    async def resolve_font_faces(self, family: str, options: ResolveOptions) -> ProviderResult:
        if self._families is None:
            await self.setup()
        assert self._families is not None
        font = self._families.get(family)
        if font is None:
            raise UnknownFamilyError(family, self.name)

        styles = sorted({STYLE_FLAGS[style] for style in options.styles if style in STYLE_FLAGS})
        weights = self._weights(font, options)
        if not weights or not styles or not options.subsets:
            return ProviderResult(fonts=[])

        variants = sorted(f"{style},{weight}" for weight in weights for style in styles)
        url = self.css_url(family, variants, list(options.subsets))

        css = ""
        for user_agent in USER_AGENTS.values():
            css += await self.fetcher.fetch_text(url, headers={"User-Agent": user_agent})

        faces = extract_font_faces(css, family)
        return ProviderResult(fonts=add_local_fallbacks(family, faces))


__all__ = ["CATALOG_URL", "CSS2_URL", "GoogleFontsProvider", "STYLE_FLAGS", "USER_AGENTS"]
