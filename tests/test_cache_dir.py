from __future__ import annotations

from pathlib import Path

from fontshelf.core.cache_dir import CACHE_ENV, cache_root, cache_root_context, font_cache_dir
from fontshelf.fonts.cache import FontCache


def test_environment_variable_wins(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv(CACHE_ENV, str(tmp_path / "env-cache"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg"))

    assert cache_root() == tmp_path / "env-cache"
    assert FontCache().root == tmp_path / "env-cache" / "fonts"


def test_xdg_cache_home_is_used(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv(CACHE_ENV, raising=False)
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg"))

    assert font_cache_dir() == tmp_path / "xdg" / "fontshelf" / "fonts"


def test_home_fallback(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv(CACHE_ENV, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))

    assert cache_root() == tmp_path / "home" / ".cache" / "fontshelf"


def test_context_overrides_and_restores(tmp_path: Path) -> None:
    before = cache_root()

    with cache_root_context(tmp_path / "elsewhere") as current:
        assert current == tmp_path / "elsewhere"
        assert FontCache().root == tmp_path / "elsewhere" / "fonts"

    assert cache_root() == before
    assert not (tmp_path / "elsewhere").exists()
