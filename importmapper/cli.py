"""
Command-line interface for importmapper.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from importmapper.config import load_config
from importmapper.__version__ import __version__
from importmapper.context import ImportMapperContext
from importmapper.exceptions import ConfigError, ImportMapperError
from importmapper.utils.logger import get_logger, setup_logging
from importmapper.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="IMPORTMAPPER_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="IMPORTMAPPER_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="importmapper",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """importmapper: import maps and npm packages without a bundler.

    \b
    Available commands:
      importmapper require         Add packages or local files
      importmapper remove          Remove entries
      importmapper update          Update remote packages
      importmapper install         Download missing vendored packages
      importmapper dump            Pre-render import map files
      importmapper show            Print the import map

    \b
    Examples:
      importmapper require lodash@^4.17 --download
      importmapper require app --path assets/app.js --entrypoint
      importmapper show app

    Use ``importmapper COMMAND --help`` for command-specific options.
    """
    _configure_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    importmapper_ctx = ImportMapperContext()
    importmapper_ctx.config_path = config or loaded_config.source_path
    importmapper_ctx.color = color
    importmapper_ctx.verbose = verbose
    importmapper_ctx.config = loaded_config
    ctx.obj = importmapper_ctx

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    logger.debug("importmapper v%s", __version__)
    logger.debug("Config path: %s", importmapper_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
from importmapper.commands.dump import dump  # noqa: E402
from importmapper.commands.install import install  # noqa: E402
from importmapper.commands.remove import remove  # noqa: E402
from importmapper.commands.require import require  # noqa: E402
from importmapper.commands.show import show  # noqa: E402
from importmapper.commands.update import update  # noqa: E402

cli.add_command(require)
cli.add_command(remove)
cli.add_command(update)
cli.add_command(install)
cli.add_command(dump)
cli.add_command(show)


def main() -> int:
    """Main entry point for the importmapper CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except ImportMapperError as exc:
        print_error(str(exc))
        logger.debug(
            "ImportMapperError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except (KeyboardInterrupt, click.Abort):
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
