"""Provider serving font files found in local directories."""

from __future__ import annotations

from collections.abc import Iterable
import logging
from pathlib import Path
from typing import Any

from fontshelf.core.exceptions import UnknownFamilyError
from fontshelf.fonts.css import FORMAT_EXTENSIONS
from fontshelf.fonts.model import FontFace, FontSource, ProviderResult, RemoteSource, ResolveOptions


FONT_EXTENSIONS: tuple[str, ...] = (".ttf", ".woff", ".woff2", ".eot", ".otf")

_log = logging.getLogger(__name__)


class LocalFontsProvider:
    """Match font files whose name contains the requested family.

    Every requested weight/style pair receives the same list of matching
    files; the directories are scanned once during :meth:`setup`. The cache
    identity lists the resolved directories and, once scanned, the path,
    size and modification time of every font file found.
    """

    name = "local"

    def __init__(self, directories: Iterable[str | Path]) -> None:
        self.directories = [Path(directory) for directory in directories]
        self._paths: list[Path] | None = None
        self._stamps: list[tuple[str, int, int]] | None = None

    @property
    def cache_identity(self) -> dict[str, Any]:
        return {
            "directories": [str(directory.resolve()) for directory in self.directories],
            "files": self._stamps,
        }

    async def setup(self) -> None:
        paths: list[Path] = []
        for directory in self.directories:
            if not directory.is_dir():
                _log.debug("Skipping missing font directory %s", directory)
                continue
            paths.extend(
                path.resolve()
                for path in directory.rglob("*")
                if path.is_file() and path.suffix.lower() in FONT_EXTENSIONS
            )
        self._paths = sorted(paths)
        self._stamps = []
        for path in self._paths:
            stat = path.stat()
            self._stamps.append((str(path), stat.st_size, stat.st_mtime_ns))

    def _matches(self, path: Path, family: str) -> bool:
        return family in path.stem or family.replace(" ", "") in path.stem

    async def resolve_font_faces(self, family: str, options: ResolveOptions) -> ProviderResult:
        if self._paths is None:
            await self.setup()
        assert self._paths is not None
        matches = [path for path in self._paths if self._matches(path, family)]
        if not matches:
            raise UnknownFamilyError(family, self.name)

        fonts: list[FontFace] = []
        for weight in options.weights:
            for style in options.styles:
                src: list[FontSource] = [
                    RemoteSource(
                        url=path.as_uri(),
                        format=FORMAT_EXTENSIONS.get(path.suffix.lower().lstrip(".")),
                    )
                    for path in matches
                ]
                fonts.append(FontFace(src=src, weight=weight, style=style))
        return ProviderResult(fonts=fonts)


__all__ = ["FONT_EXTENSIONS", "LocalFontsProvider"]
