"""Font providers resolving family requests into descriptors."""

from fontshelf.fonts.providers.base import FontProvider
from fontshelf.fonts.providers.google import GoogleFontsProvider
from fontshelf.fonts.providers.local import LocalFontsProvider


__all__ = ["FontProvider", "GoogleFontsProvider", "LocalFontsProvider"]
