"""
Shared context object for importmapper CLI commands.

This module defines the global Click context used to share configuration
and runtime options across CLI subcommands, and builds the
:class:`~importmapper.core.manager.ImportMapManager` they all operate on.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from importmapper.config import ImportMapperConfig
from importmapper.core import (
    DirectoryAssetLookup,
    HttpContentFetcher,
    ImportMapManager,
    JsDelivrEsmResolver,
    JsonEntryStore,
    StaticPublicPath,
)


class ImportMapperContext:
    """Global context object for importmapper CLI commands.

    Attributes:
        config_path: Path to the importmapper configuration file, if provided.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration, set by the CLI group.
    """

    __slots__ = ("config_path", "verbose", "color", "config", "_manager")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: Optional[ImportMapperConfig] = None
        self._manager: Optional[ImportMapManager] = None

    @property
    def manager(self) -> ImportMapManager:
        """The manager wired from :attr:`config` (defaults when unset)."""
        if self._manager is None:
            config = self.config or ImportMapperConfig()
            self._manager = ImportMapManager(
                asset_lookup=DirectoryAssetLookup(
                    config.asset_paths,
                    public_prefix=config.public_prefix,
                ),
                public_path_probe=StaticPublicPath(config.public_path),
                entry_store=JsonEntryStore(config.entries_path),
                vendor_dir=config.vendor_path,
                resolver=JsDelivrEsmResolver(timeout=config.timeout),
                fetcher=HttpContentFetcher(timeout=config.timeout),
            )
        return self._manager


#: Click decorator for injecting :class:`ImportMapperContext` into commands.
pass_context = click.make_pass_decorator(ImportMapperContext, ensure=True)
