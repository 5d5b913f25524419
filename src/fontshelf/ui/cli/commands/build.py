"""Implementation of the `fontshelf build` command."""

from __future__ import annotations

from pathlib import Path

from fontshelf.fonts.logging import FontPipelineLogger
from fontshelf.fonts.pipeline import build_fonts

from .._options import CacheDirOption, ConfigArgument, OutputDirOption
from ..state import get_cli_state
from ..utils import load_fonts_config, open_cache, run_pipeline


def build(
    config_path: ConfigArgument,
    output_dir: OutputDirOption = Path("build"),
    cache_dir: CacheDirOption = None,
) -> None:
    """Resolve the configured families and write the stylesheet and font files."""
    state = get_cli_state()
    config = load_fonts_config(config_path)
    logger = FontPipelineLogger(verbose=state.verbosity > 0)
    result = run_pipeline(
        build_fonts(config, output_dir, cache=open_cache(cache_dir), logger=logger)
    )
    for family in result.families:
        state.console.print(
            f"[bold]{family.name}[/] [dim]({family.provider})[/] {len(family.faces)} faces"
        )
