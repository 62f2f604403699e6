"""Install command implementation for importmapper.

Re-downloads vendored package files that are missing on disk, e.g. after a
fresh checkout where the vendor directory is not committed. Packages that
fail to download are reported through the log and do not stop the others.
"""

from __future__ import annotations

import click

from importmapper.context import pass_context, ImportMapperContext
from importmapper.utils import print_success


@click.command()
@pass_context
def install(ctx: ImportMapperContext) -> None:
    """Download vendored packages that are missing."""
    repaired = ctx.manager.download_missing_packages()

    if not repaired:
        print_success("No missing packages to download")
        return

    for entry in repaired:
        print_success(f'Downloaded "{entry.import_name}" to {entry.path}')
