"""CLI command implementations exposed via `fontshelf.ui.cli`."""

from __future__ import annotations

from .build import build
from .cache import cache_app
from .css import css


__all__ = ["build", "cache_app", "css"]
