"""Helpers shared by CLI commands."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar

import typer

from fontshelf.core.config import FontsConfig, load_config
from fontshelf.core.exceptions import FontshelfError
from fontshelf.fonts.cache import FontCache

from .state import debug_enabled, emit_error


T = TypeVar("T")

_SIZE_UNITS = ("B", "KiB", "MiB", "GiB")


def load_fonts_config(path: Path) -> FontsConfig:
    """Load a configuration file, exiting with status 1 on failure."""
    try:
        return load_config(path)
    except FontshelfError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


def open_cache(cache_dir: Path | None) -> FontCache:
    return FontCache(cache_dir) if cache_dir is not None else FontCache()


def run_pipeline(coroutine: Coroutine[Any, Any, T]) -> T:
    """Drive a pipeline coroutine, turning library errors into CLI errors."""
    try:
        return asyncio.run(coroutine)
    except FontshelfError as exc:
        if debug_enabled():
            raise
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


def format_size(size: int) -> str:
    value = float(size)
    for unit in _SIZE_UNITS:
        if value < 1024 or unit == _SIZE_UNITS[-1]:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


__all__ = ["format_size", "load_fonts_config", "open_cache", "run_pipeline"]
