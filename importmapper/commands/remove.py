"""Remove command implementation for importmapper."""

from __future__ import annotations

from typing import Tuple

import click

from importmapper.context import pass_context, ImportMapperContext
from importmapper.utils import print_success


@click.command()
@click.argument("names", nargs=-1, required=True)
@pass_context
def remove(ctx: ImportMapperContext, names: Tuple[str, ...]) -> None:
    """Remove entries from the import map.

    Vendored files of downloaded packages are deleted as well.
    """
    ctx.manager.remove(list(names))
    for name in names:
        print_success(f'Removed "{name}"')
