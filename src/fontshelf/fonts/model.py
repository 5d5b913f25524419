"""Typed representation of ``@font-face`` descriptors and provider requests."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, Union


FontDisplay = Literal["auto", "block", "swap", "fallback", "optional"]
FontWeight = Union[int, float, str, tuple[int, int]]


@dataclass(frozen=True, slots=True)
class LocalSource:
    """A font installed on the end-user's system, rendered as ``local()``."""

    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name}


@dataclass(frozen=True, slots=True)
class RemoteSource:
    """A network or file addressable font resource, rendered as ``url()``."""

    url: str
    format: str | None = None
    tech: str | None = None
    original_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"url": self.url}
        for key in ("format", "tech", "original_url"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload

    @property
    def origin(self) -> str:
        """Return the URL the payload was originally published at."""
        return self.original_url or self.url


FontSource = Union[LocalSource, RemoteSource]


def source_from_value(value: Any) -> FontSource:
    """Build a source from a bare URL string or a serialised mapping."""
    if isinstance(value, (LocalSource, RemoteSource)):
        return value
    if isinstance(value, str):
        return RemoteSource(url=value)
    if isinstance(value, Mapping):
        if "url" in value:
            return RemoteSource(
                url=str(value["url"]),
                format=value.get("format"),
                tech=value.get("tech"),
                original_url=value.get("original_url") or value.get("originalURL"),
            )
        if "name" in value:
            return LocalSource(name=str(value["name"]))
    raise TypeError(f"Unsupported font source: {value!r}")


def normalize_sources(value: Any) -> list[FontSource]:
    """Collapse the scalar / single / list ``src`` shapes into a list."""
    if value is None:
        return []
    if isinstance(value, (str, Mapping, LocalSource, RemoteSource)):
        return [source_from_value(value)]
    return [source_from_value(item) for item in value]


def _normalize_weight(value: Any) -> FontWeight | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        if len(value) == 2:
            return (value[0], value[1])
        if len(value) == 1:
            return value[0]
        return " ".join(str(item) for item in value)
    return value


def _stringify(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)


@dataclass(slots=True)
class FontFace:
    """Normalized ``@font-face`` rule.

    ``src`` keeps the browser fallback order. ``display`` is left unset when
    the rule did not declare it; the renderer applies ``swap``.
    """

    src: list[FontSource] = field(default_factory=list)
    display: str | None = None
    weight: FontWeight | None = None
    style: str | None = None
    stretch: str | None = None
    unicode_range: list[str] | None = None
    feature_settings: str | None = None
    variation_settings: str | None = None

    def identity(self) -> tuple[str | None, ...]:
        """Return the merge key: every field except ``src``, compared as strings."""
        return (
            _stringify(self.display),
            _stringify(self.weight),
            _stringify(self.style),
            _stringify(self.stretch),
            _stringify(self.unicode_range),
            _stringify(self.feature_settings),
            _stringify(self.variation_settings),
        )

    @property
    def is_variable(self) -> bool:
        return isinstance(self.weight, tuple)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"src": [source.to_dict() for source in self.src]}
        for key in (
            "display",
            "weight",
            "style",
            "stretch",
            "unicode_range",
            "feature_settings",
            "variation_settings",
        ):
            value = getattr(self, key)
            if value is None:
                continue
            payload[key] = list(value) if isinstance(value, (tuple, list)) else value
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FontFace:
        unicode_range = data.get("unicode_range", data.get("unicodeRange"))
        if isinstance(unicode_range, str):
            unicode_range = [unicode_range]
        return cls(
            src=normalize_sources(data.get("src")),
            display=data.get("display"),
            weight=_normalize_weight(data.get("weight")),
            style=data.get("style"),
            stretch=data.get("stretch"),
            unicode_range=list(unicode_range) if unicode_range is not None else None,
            feature_settings=data.get("feature_settings", data.get("featureSettings")),
            variation_settings=data.get("variation_settings", data.get("variationSettings")),
        )


@dataclass(slots=True)
class ResolveOptions:
    """Variants requested from a provider for one family."""

    weights: list[int] = field(default_factory=list)
    styles: list[str] = field(default_factory=list)
    subsets: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[Any]]:
        return {
            "weights": list(self.weights),
            "styles": list(self.styles),
            "subsets": list(self.subsets),
        }


@dataclass(slots=True)
class ProviderResult:
    """Descriptors returned by a provider for one family."""

    fonts: list[FontFace] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"fonts": [font.to_dict() for font in self.fonts]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProviderResult:
        fonts: Sequence[Mapping[str, Any]] = data.get("fonts") or []
        return cls(fonts=[FontFace.from_dict(entry) for entry in fonts])


__all__ = [
    "FontDisplay",
    "FontFace",
    "FontSource",
    "FontWeight",
    "LocalSource",
    "ProviderResult",
    "RemoteSource",
    "ResolveOptions",
    "normalize_sources",
    "source_from_value",
]
