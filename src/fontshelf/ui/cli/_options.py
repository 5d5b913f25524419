"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


ConfigArgument = Annotated[
    Path,
    typer.Argument(
        metavar="CONFIG",
        help="YAML file listing the font families to resolve.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]

OutputDirOption = Annotated[
    Path,
    typer.Option(
        "--out",
        "-o",
        help="Directory receiving the stylesheet and the _fonts/ folder.",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
]

CacheDirOption = Annotated[
    Path | None,
    typer.Option(
        "--cache-dir",
        help="Font cache root (defaults to <cache dir>/fonts).",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
]


__all__ = ["CacheDirOption", "ConfigArgument", "OutputDirOption"]
