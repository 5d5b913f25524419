"""Resolution of the directory holding the fontshelf cache.

The root is taken, in order, from an active :func:`cache_root_context`,
``FONTSHELF_CACHE_DIR``, ``$XDG_CACHE_HOME/fontshelf`` and finally
``~/.cache/fontshelf``. Environment variables are read on every call.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
import os
from pathlib import Path


APP_NAME = "fontshelf"
CACHE_ENV = "FONTSHELF_CACHE_DIR"
FONTS_NAMESPACE = "fonts"

_OVERRIDE: ContextVar[Path | None] = ContextVar("fontshelf_cache_root", default=None)


def cache_root() -> Path:
    """Return the cache root without creating it."""
    override = _OVERRIDE.get()
    if override is not None:
        return override
    env_cache = os.environ.get(CACHE_ENV)
    if env_cache:
        return Path(env_cache).expanduser()
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache).expanduser() / APP_NAME
    return Path.home() / ".cache" / APP_NAME


def font_cache_dir() -> Path:
    """Return the default root of :class:`~fontshelf.fonts.cache.FontCache`."""
    return cache_root() / FONTS_NAMESPACE


@contextmanager
def cache_root_context(root: str | Path) -> Iterator[Path]:
    """Temporarily point the cache root at ``root``."""
    resolved = Path(root).expanduser()
    token = _OVERRIDE.set(resolved)
    try:
        yield resolved
    finally:
        _OVERRIDE.reset(token)


__all__ = [
    "APP_NAME",
    "CACHE_ENV",
    "FONTS_NAMESPACE",
    "cache_root",
    "cache_root_context",
    "font_cache_dir",
]
