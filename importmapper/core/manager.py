"""
Import map manager facade.

:class:`ImportMapManager` is the single entry point used by the CLI and by
applications rendering ``<script type="importmap">`` tags. Read operations
go through :class:`~importmapper.core.graph.GraphResolver`, unless a build
step pre-rendered the result into the public directory; mutating operations
are delegated to
:class:`~importmapper.core.lifecycle.PackageLifecycleCoordinator`.

Example:
    >>> manager = ImportMapManager(
    ...     asset_lookup=DirectoryAssetLookup(["assets"]),
    ...     public_path_probe=StaticPublicPath("public/assets"),
    ...     entry_store=JsonEntryStore("importmap.json"),
    ...     vendor_dir="assets/vendor",
    ...     resolver=JsDelivrEsmResolver(),
    ...     fetcher=HttpContentFetcher(),
    ... )
    >>> manager.get_import_map_data(["app"])
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

from importmapper.constants import (
    ENTRYPOINT_CACHE_FILENAME_PATTERN,
    IMPORT_MAP_CACHE_FILENAME,
)
from importmapper.core.graph import GraphResolver, RawImportMap
from importmapper.core.interfaces import (
    AssetLookup,
    ContentFetcher,
    EntryStore,
    PublicPathProbe,
    RegistryResolver,
)
from importmapper.core.lifecycle import PackageLifecycleCoordinator
from importmapper.core.specifier import parse_package_name
from importmapper.exceptions import FileOperationError
from importmapper.models.entry import ImportMapEntry
from importmapper.models.package import PackageRequireOptions, PackageUpdate
from importmapper.utils.filesystem import safe_read_file, safe_write_file
from importmapper.utils.logger import get_logger

logger = get_logger("manager")

__all__ = ["ImportMapManager"]


class ImportMapManager:
    """Facade over import map generation and package management.

    Args:
        asset_lookup: Asset pipeline oracle.
        public_path_probe: Locates pre-rendered ``importmap.json`` and
            ``entrypoint.<name>.json`` files.
        entry_store: Persisted entry list.
        vendor_dir: Directory that receives vendored packages.
        resolver: Registry resolver for ``require``/``update``.
        fetcher: Content fetcher for ``download_missing_packages``.
    """

    parse_package_name = staticmethod(parse_package_name)

    def __init__(
        self,
        asset_lookup: AssetLookup,
        public_path_probe: PublicPathProbe,
        entry_store: EntryStore,
        vendor_dir: Union[str, Path],
        resolver: RegistryResolver,
        fetcher: ContentFetcher,
    ) -> None:
        self.asset_lookup = asset_lookup
        self.public_path_probe = public_path_probe
        self.entry_store = entry_store
        self.lifecycle = PackageLifecycleCoordinator(
            entry_store=entry_store,
            asset_lookup=asset_lookup,
            resolver=resolver,
            fetcher=fetcher,
            vendor_dir=vendor_dir,
        )

    @property
    def graph(self) -> GraphResolver:
        return GraphResolver(self.asset_lookup, self.entry_store.root_directory())

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def get_raw_import_map_data(self) -> RawImportMap:
        """Return the raw import map, from the pre-rendered file when present."""
        cached = self._read_cache_file(IMPORT_MAP_CACHE_FILENAME)
        if cached is not None:
            return cached

        return self.graph.build_raw_map(self.entry_store.read())

    def get_entrypoint_metadata(self, entrypoint_name: str) -> List[str]:
        """Return the eager import keys of an entrypoint.

        Raises:
            UnknownEntryError: No such entry.
            InvalidEntrypointError: The entry cannot be used as an entrypoint.
        """
        cached = self._read_cache_file(
            ENTRYPOINT_CACHE_FILENAME_PATTERN.format(name=entrypoint_name)
        )
        if cached is not None:
            return cached

        graph = self.graph
        entries = self.entry_store.read()
        asset = graph.entrypoint_asset(entries, entrypoint_name)
        return graph.build_entrypoint_metadata(asset, entries)

    def get_import_map_data(self, entrypoint_names: Sequence[str]) -> RawImportMap:
        """Return the final import map for a page loading ``entrypoint_names``."""
        raw_map = self.get_raw_import_map_data()
        entrypoints = [
            (name, self.get_entrypoint_metadata(name)) for name in entrypoint_names
        ]
        return self.graph.build_import_map_data(raw_map, entrypoints)

    def find_root_import_map_entry(self, import_name: str) -> Optional[ImportMapEntry]:
        entries = self.entry_store.read()
        return entries.get(import_name) if import_name in entries else None

    def get_entrypoint_names(self) -> List[str]:
        return [entry.import_name for entry in self.entry_store.read() if entry.is_entrypoint]

    # ------------------------------------------------------------------
    # Write side
    # ------------------------------------------------------------------

    def require(self, packages: Sequence[PackageRequireOptions]) -> List[ImportMapEntry]:
        return self.lifecycle.require(packages)

    def remove(self, import_names: Sequence[str]) -> None:
        self.lifecycle.remove(import_names)

    def update(self, import_names: Optional[Sequence[str]] = None) -> List[PackageUpdate]:
        return self.lifecycle.update(import_names)

    def download_missing_packages(self) -> List[ImportMapEntry]:
        return self.lifecycle.download_missing_packages()

    def dump_cache_files(self, directory: Optional[Union[str, Path]] = None) -> List[Path]:
        """Pre-render the raw import map and every entrypoint's preload list.

        The files are computed from the entries, never from existing cache
        files, and written to ``directory`` (the public directory by
        default). An invalid entrypoint aborts before any file is written.

        Returns:
            The written paths, import map first.
        """
        target_dir = Path(directory or self.public_path_probe.public_filesystem_path())
        entries = self.entry_store.read()
        graph = self.graph

        payloads: List[Tuple[str, Any]] = [(IMPORT_MAP_CACHE_FILENAME, graph.build_raw_map(entries))]
        for entry in entries:
            if not entry.is_entrypoint:
                continue
            asset = graph.entrypoint_asset(entries, entry.import_name)
            payloads.append(
                (
                    ENTRYPOINT_CACHE_FILENAME_PATTERN.format(name=entry.import_name),
                    graph.build_entrypoint_metadata(asset, entries),
                )
            )

        # Nothing is written unless every payload could be computed
        return [self._write_cache_file(target_dir / filename, data) for filename, data in payloads]

    # ------------------------------------------------------------------
    # Cache files
    # ------------------------------------------------------------------

    def _read_cache_file(self, filename: str) -> Optional[Any]:
        path = Path(self.public_path_probe.public_filesystem_path()) / filename
        if not path.is_file():
            return None

        logger.debug("Using pre-rendered %s", path)
        try:
            return json.loads(safe_read_file(path))
        except json.JSONDecodeError as exc:
            raise FileOperationError(
                f"Invalid JSON in {path}: {exc}",
                file_path=str(path),
                operation="parse",
                original_error=exc,
            ) from exc

    def _write_cache_file(self, path: Path, data: Any) -> Path:
        safe_write_file(path, json.dumps(data, indent=4) + "\n")
        logger.info("Wrote %s", path)
        return path
