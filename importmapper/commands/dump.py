"""Dump command implementation for importmapper.

Pre-renders ``importmap.json`` and one ``entrypoint.<name>.json`` per
declared entrypoint into the public directory, so that serving pages never
has to walk the dependency graph again.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from importmapper.context import pass_context, ImportMapperContext
from importmapper.utils import print_success


@click.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to write to (default: the configured public directory).",
)
@pass_context
def dump(ctx: ImportMapperContext, output: Optional[Path]) -> None:
    """Write the pre-rendered import map files."""
    for path in ctx.manager.dump_cache_files(output):
        print_success(f"Wrote {path}")
