"""Update command implementation for importmapper.

Re-resolves remote packages against the registry, keeping each entry's
import name and download mode, and reports the version changes.

Typical usage::

    # Update every remote package
    $ importmapper update

    # Update only some of them
    $ importmapper update lodash @hotwired/stimulus
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import click

from importmapper.context import pass_context, ImportMapperContext
from importmapper.core import parse_package_url
from importmapper.models import PackageUpdate
from importmapper.utils import (
    colorize_update_type,
    get_logger,
    get_update_type,
    print_success,
    print_table,
)

logger = get_logger("commands.update")


@click.command()
@click.argument("names", nargs=-1)
@pass_context
def update(ctx: ImportMapperContext, names: Tuple[str, ...]) -> None:
    """Update remote packages (all of them when no NAMES are given)."""
    updates = ctx.manager.update(list(names) or None)

    if not updates:
        print_success("Nothing to update")
        return

    _display_updates(updates)
    print_success(f"Updated {len(updates)} package(s)")


def _url_version(url: Optional[str]) -> Optional[str]:
    parsed = parse_package_url(url) if url else None
    return parsed.version if parsed else None


def _display_updates(updates: List[PackageUpdate]) -> None:
    """Display the applied updates as a Rich table.

    Example output::

        ┏━━━━━━━━━┳━━━━━━━━━━┳━━━━━━━━━┳━━━━━━━━┓
        ┃ Package ┃ Previous ┃ Current ┃ Change ┃
        ┡━━━━━━━━━╇━━━━━━━━━━╇━━━━━━━━━╇━━━━━━━━┩
        │ lodash  │ 4.17.20  │ 4.17.21 │ patch  │
        └─────────┴──────────┴─────────┴────────┘
    """
    data = []
    for item in updates:
        previous = _url_version(item.previous.url)
        current = _url_version(item.current.url)
        logger.debug("%s: %s -> %s", item.import_name, previous, current)

        change = colorize_update_type(get_update_type(previous, current))

        data.append(
            {
                "Package": item.import_name,
                "Previous": previous or "-",
                "Current": f"[bold green]{current or '-'}[/bold green]",
                "Change": change,
            }
        )

    print_table(
        data,
        title="Updated Packages",
        column_styles={
            "Package": {"style": "bold cyan", "no_wrap": True},
            "Previous": {"justify": "center", "style": "dim"},
            "Current": {"justify": "center"},
            "Change": {"justify": "center"},
        },
    )
