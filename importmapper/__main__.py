"""
Executable module for importmapper.

Running:
    python -m importmapper

is equivalent to:
    importmapper
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Explain on stderr why the CLI could not be imported."""
    print("importmapper could not start: a dependency failed to import.", file=sys.stderr)
    print(f"Python version : {sys.version}", file=sys.stderr)
    try:
        from importmapper.__version__ import __version__

        print(f"importmapper version: {__version__}", file=sys.stderr)
    except ImportError:
        print("importmapper version: <unknown>", file=sys.stderr)
    print(file=sys.stderr)
    print(f"ImportError: {exc}", file=sys.stderr)


def main() -> int:
    """Main entrypoint when executing ``python -m importmapper``.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from importmapper.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
