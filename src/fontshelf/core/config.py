"""Configuration models describing the font families to resolve.

FontsConfig

`families` (`list[FamilyConfig]`)
: Font families to resolve, in order. Each family names the provider that
  serves it.

`providers` (`ProvidersConfig`)
: Provider settings. The remote catalog provider is enabled by default; the
  local provider is enabled by listing at least one directory.

`asset_prefix` (`str`)
: URL prefix used when rewriting font sources. Defaults to ``/_fonts``.

`css_filename` (`str`)
: Name of the stylesheet written by ``fontshelf build``.

`base_dir` (`Path | None`)
: Directory used to resolve relative paths. Set by :func:`load_config` to the
  folder containing the configuration file.

FamilyConfig

`name` (`str`)
: Family name as known by the provider (``Roboto``, ``Inter``...).

`provider` (`str`)
: Provider identifier (``google`` or ``local``).

`weights` (`list[int]`), `styles` (`list[str]`), `subsets` (`list[str]`)
: Extra variants requested on top of the defaults (weight 400, normal and
  italic styles, the common Latin/Greek/Cyrillic/Vietnamese subsets).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
import yaml

from fontshelf.core.exceptions import ConfigError


if TYPE_CHECKING:
    from fontshelf.fonts.model import ResolveOptions


FontStyle = Literal["normal", "italic", "oblique"]

DEFAULT_WEIGHTS: tuple[int, ...] = (400,)
DEFAULT_STYLES: tuple[FontStyle, ...] = ("normal", "italic")
DEFAULT_SUBSETS: tuple[str, ...] = (
    "cyrillic-ext",
    "cyrillic",
    "greek-ext",
    "greek",
    "vietnamese",
    "latin-ext",
    "latin",
)
DEFAULT_ASSET_PREFIX = "/_fonts"


def _unique(values: list[Any]) -> list[Any]:
    seen: set[Any] = set()
    ordered: list[Any] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered


class FamilyConfig(BaseModel):
    """A font family request."""

    model_config = ConfigDict(extra="forbid")

    name: str
    provider: str = "google"
    weights: list[int] = Field(default_factory=list)
    styles: list[FontStyle] = Field(default_factory=list)
    subsets: list[str] = Field(default_factory=list)

    def resolve_options(self) -> ResolveOptions:
        """Merge the family variants with the defaults, keeping first occurrences."""
        from fontshelf.fonts.model import ResolveOptions

        return ResolveOptions(
            weights=_unique([*DEFAULT_WEIGHTS, *self.weights]),
            styles=_unique([*DEFAULT_STYLES, *self.styles]),
            subsets=_unique([*DEFAULT_SUBSETS, *self.subsets]),
        )


class GoogleProviderConfig(BaseModel):
    """Settings for the remote font catalog provider."""

    model_config = ConfigDict(extra="forbid")

    catalog_url: str | None = None


class LocalProviderConfig(BaseModel):
    """Settings for the local filesystem provider."""

    model_config = ConfigDict(extra="forbid")

    directories: list[Path] = Field(default_factory=list)


class ProvidersConfig(BaseModel):
    """Enabled providers and their settings."""

    model_config = ConfigDict(extra="forbid")

    google: GoogleProviderConfig | None = Field(default_factory=GoogleProviderConfig)
    local: LocalProviderConfig | None = None


class FontsConfig(BaseModel):
    """Top-level configuration loaded from ``fontshelf.yml``."""

    model_config = ConfigDict(extra="forbid")

    families: list[FamilyConfig] = Field(default_factory=list)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    asset_prefix: str = DEFAULT_ASSET_PREFIX
    css_filename: str = "fonts.css"
    base_dir: Path | None = None

    def resolve_path(self, value: Path) -> Path:
        """Resolve ``value`` against :attr:`base_dir` when it is relative."""
        path = Path(value).expanduser()
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return path


def load_config(path: str | Path) -> FontsConfig:
    """Load and validate a YAML configuration file."""
    config_path = Path(path)
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration '{config_path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in '{config_path}': {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration '{config_path}' must be a mapping.")

    raw.setdefault("base_dir", str(config_path.resolve().parent))
    try:
        return FontsConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration '{config_path}':\n{exc}") from exc


__all__ = [
    "DEFAULT_ASSET_PREFIX",
    "DEFAULT_STYLES",
    "DEFAULT_SUBSETS",
    "DEFAULT_WEIGHTS",
    "FamilyConfig",
    "FontsConfig",
    "GoogleProviderConfig",
    "LocalProviderConfig",
    "ProvidersConfig",
    "load_config",
]
