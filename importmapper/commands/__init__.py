"""CLI subcommands, each a click command registered by :mod:`importmapper.cli`."""
