from __future__ import annotations

from pathlib import Path

import pytest

from fontshelf.core.config import (
    DEFAULT_SUBSETS,
    FamilyConfig,
    FontsConfig,
    load_config,
)
from fontshelf.core.exceptions import ConfigError


def test_load_config_reads_yaml(tmp_path: Path) -> None:
    path = tmp_path / "fontshelf.yml"
    path.write_text(
        """
providers:
  google: {}
  local:
    directories: [fonts]
families:
  - name: Roboto
    weights: [700]
    styles: [italic]
    subsets: [latin]
  - name: Inter
    provider: local
asset_prefix: /static/fonts
""",
        encoding="utf-8",
    )

    config = load_config(path)

    assert [family.name for family in config.families] == ["Roboto", "Inter"]
    assert config.families[0].provider == "google"
    assert config.asset_prefix == "/static/fonts"
    assert config.base_dir == tmp_path.resolve()
    assert config.providers.local is not None
    assert config.resolve_path(config.providers.local.directories[0]) == tmp_path.resolve() / "fonts"


def test_resolve_options_merges_defaults_without_duplicates() -> None:
    family = FamilyConfig(
        name="Roboto", weights=[700, 400], styles=["italic", "oblique"], subsets=["latin", "khmer"]
    )

    options = family.resolve_options()

    assert options.weights == [400, 700]
    assert options.styles == ["normal", "italic", "oblique"]
    assert options.subsets == [*DEFAULT_SUBSETS, "khmer"]


def test_defaults() -> None:
    config = FontsConfig()

    assert config.asset_prefix == "/_fonts"
    assert config.css_filename == "fonts.css"
    assert config.providers.google is not None
    assert config.providers.local is None
    assert FamilyConfig(name="A").resolve_options().weights == [400]


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")

    assert load_config(path).families == []


@pytest.mark.parametrize(
    "content",
    [
        "families: [{name: Roboto, colour: red}]",
        "families: [{name: Roboto, styles: [slanted]}]",
        "- just\n- a list\n",
        "families: [unterminated",
    ],
)
def test_invalid_configuration_raises_config_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "bad.yml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Unable to read"):
        load_config(tmp_path / "absent.yml")
