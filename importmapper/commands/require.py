"""Require command implementation for importmapper.

Adds npm packages (resolved through the registry in one batch) or local
files to the import map.

Typical usage::

    # Remote package served from the CDN
    $ importmapper require lodash

    # Several packages, vendored into the asset directory
    $ importmapper require "lodash@^4.17" "@hotwired/stimulus" --download

    # Alias and registry prefix
    $ importmapper require "npm:lodash-es@4=lodash"

    # Local file as a page entrypoint
    $ importmapper require app --path assets/app.js --entrypoint
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

import click

from importmapper.context import pass_context, ImportMapperContext
from importmapper.core import parse_package_name
from importmapper.models import PackageRequireOptions
from importmapper.utils import get_logger, print_success

logger = get_logger("commands.require")


@click.command()
@click.argument("packages", nargs=-1, required=True)
@click.option(
    "--download",
    "-d",
    is_flag=True,
    help="Download the packages into the vendor directory.",
)
@click.option(
    "--path",
    "local_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Declare a local file instead of a remote package (single package only).",
)
@click.option(
    "--entrypoint",
    is_flag=True,
    help="Make the new entries usable as page entrypoints.",
)
@pass_context
def require(
    ctx: ImportMapperContext,
    packages: Tuple[str, ...],
    download: bool,
    local_path: Optional[Path],
    entrypoint: bool,
) -> None:
    """Add PACKAGES to the import map.

    Each package is written ``[registry:]name[@version][=alias]``.
    """
    if local_path is not None and len(packages) > 1:
        raise click.UsageError("--path can only be used with a single package.")

    requests = []
    for package in packages:
        specifier = parse_package_name(package)
        requests.append(
            PackageRequireOptions.from_specifier(
                specifier,
                download=download,
                path=str(local_path.absolute()) if local_path is not None else None,
                entrypoint=entrypoint,
            )
        )

    logger.info("Requiring %d package(s)", len(requests))
    for entry in ctx.manager.require(requests):
        if entry.is_downloaded:
            print_success(f'Package "{entry.import_name}" downloaded to {entry.path}')
        elif entry.url is not None:
            print_success(f'Package "{entry.import_name}" added: {entry.url}')
        else:
            print_success(f'Entry "{entry.import_name}" added: {entry.path}')
