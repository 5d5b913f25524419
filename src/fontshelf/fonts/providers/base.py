"""Capability contract shared by font providers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from fontshelf.fonts.model import ProviderResult, ResolveOptions


@runtime_checkable
class FontProvider(Protocol):
    """Resolve a family name and variant request into ``@font-face`` descriptors.

    ``setup`` runs once before any resolution and may perform network or disk
    work. ``resolve_font_faces`` raises
    :class:`~fontshelf.core.exceptions.UnknownFamilyError` for families the
    provider does not know, and returns an empty result when the requested
    variants match nothing.

    ``cache_identity`` is folded into the metadata cache key of every answer,
    so it must change whenever the same request could resolve differently.
    """

    name: str

    @property
    def cache_identity(self) -> Any: ...

    async def setup(self) -> None: ...

    async def resolve_font_faces(self, family: str, options: ResolveOptions) -> ProviderResult: ...


__all__ = ["FontProvider"]
