"""Implementation of the `fontshelf css` command."""

from __future__ import annotations

import typer

from fontshelf.fonts.logging import FontPipelineLogger
from fontshelf.fonts.pipeline import generate_css

from .._options import CacheDirOption, ConfigArgument
from ..utils import load_fonts_config, open_cache, run_pipeline


def css(
    config_path: ConfigArgument,
    cache_dir: CacheDirOption = None,
) -> None:
    """Print the generated ``@font-face`` stylesheet on stdout."""
    config = load_fonts_config(config_path)
    # Progress output would interleave with the stylesheet.
    logger = FontPipelineLogger(quiet=True)
    result = run_pipeline(generate_css(config, cache=open_cache(cache_dir), logger=logger))
    typer.echo(result.css, nl=False)
