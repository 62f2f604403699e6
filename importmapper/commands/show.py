"""Show command implementation for importmapper.

Prints the import map as JSON. Without arguments the raw map (every entry
and implicit dependency) is shown; with entrypoint names, the final map
ordered and flagged for those entrypoints.

Typical usage::

    $ importmapper show
    $ importmapper show app admin
    $ importmapper show app --format importmap
"""

from __future__ import annotations

import json
from typing import Any, Dict, Tuple

import click

from importmapper.context import pass_context, ImportMapperContext
from importmapper.utils import print_json


@click.command()
@click.argument("entrypoints", nargs=-1)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["data", "importmap"]),
    default="data",
    show_default=True,
    help="'data' keeps type and preload flags; 'importmap' prints the browser form.",
)
@pass_context
def show(
    ctx: ImportMapperContext,
    entrypoints: Tuple[str, ...],
    output_format: str,
) -> None:
    """Print the import map, optionally for ENTRYPOINTS."""
    manager = ctx.manager
    if entrypoints:
        data = manager.get_import_map_data(list(entrypoints))
    else:
        data = manager.get_raw_import_map_data()

    payload: Dict[str, Any] = data
    if output_format == "importmap":
        payload = {"imports": {name: item["path"] for name, item in data.items()}}

    print_json(json.dumps(payload))
