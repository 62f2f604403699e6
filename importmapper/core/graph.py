"""Import map graph resolution.

:class:`GraphResolver` turns the declared entries plus the asset pipeline's
view of each file into:

1. the **raw import map**: every declared entry, each followed (depth first)
   by the implicit dependencies its JavaScript imports need;
2. an **entrypoint preload list**: the import map keys an entrypoint
   eagerly (non-lazily) depends on, transitively;
3. the **final import map**: the raw map reordered so that each requested
   entrypoint is immediately followed by its eager dependencies, which are
   flagged ``preload``.

The resolver holds no traversal state: every walk threads its own
accumulator and visited sets, so one resolver may serve independent calls.
Output order is part of the contract because browsers process import maps
and ``modulepreload`` hints in document order.

Typical usage::

    resolver = GraphResolver(asset_lookup, root_directory=Path("/srv/app"))
    raw_map = resolver.build_raw_map(entries)
    eager = resolver.build_entrypoint_metadata(
        resolver.entrypoint_asset(entries, "app"), entries
    )
    final = resolver.build_import_map_data(raw_map, [("app", eager)])
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple, Union

from importmapper.core.interfaces import AssetLookup
from importmapper.exceptions import (
    AssetNotFoundError,
    InvalidEntrypointError,
    UnknownEntryError,
)
from importmapper.models.asset import MappedAsset
from importmapper.models.entry import ImportMapEntries, ImportMapEntry, ImportMapType
from importmapper.utils.logger import get_logger

logger = get_logger("graph")

__all__ = ["GraphResolver", "RawImportMap"]

#: ``import name -> {"path": ..., "type": ..., ["preload": True]}``
RawImportMap = Dict[str, Dict[str, Any]]


class GraphResolver:
    """Recursive, cycle-safe resolver for import map entries.

    Args:
        asset_lookup: Asset pipeline oracle.
        root_directory: Directory that ``./``-relative entry paths are
            resolved against.
    """

    def __init__(
        self,
        asset_lookup: AssetLookup,
        root_directory: Union[str, Path],
    ) -> None:
        self.asset_lookup = asset_lookup
        self.root_directory = str(root_directory)

    # ------------------------------------------------------------------
    # Asset lookup
    # ------------------------------------------------------------------

    def find_asset(self, path: str) -> Optional[MappedAsset]:
        """Resolve an entry path to an asset.

        ``./`` and ``../`` paths are joined with the root directory and,
        like absolute paths, looked up by source path. Anything else is a
        logical asset path.
        """
        if path in (".", "..") or path.startswith(("./", "../")):
            source_path = os.path.normpath(os.path.join(self.root_directory, path))
            return self.asset_lookup.by_source_path(source_path)

        if os.path.isabs(path):
            return self.asset_lookup.by_source_path(os.path.normpath(path))

        return self.asset_lookup.by_logical_path(path)

    def _require_asset(self, entry: ImportMapEntry) -> MappedAsset:
        assert entry.path is not None
        asset = self.find_asset(entry.path)
        if asset is not None:
            return asset

        if entry.is_downloaded:
            message = (
                f'The "{entry.path}" vendor asset is missing. '
                'Run "importmapper install" to download it again.'
            )
        else:
            message = (
                f'The asset "{entry.path}" declared for "{entry.import_name}" '
                "cannot be found in any asset directory."
            )
        raise AssetNotFoundError(message, path=entry.path, import_name=entry.import_name)

    # ------------------------------------------------------------------
    # Raw import map
    # ------------------------------------------------------------------

    def build_raw_map(self, entries: ImportMapEntries) -> RawImportMap:
        """Build the raw import map for ``entries``.

        Declared entries appear in declaration order, each followed by the
        implicit dependencies first reached through it. CSS entries are
        leaves; remote packages have no local asset to walk.

        Raises:
            AssetNotFoundError: A local entry (or a declared entry reached
                through an import) has no matching asset.
        """
        raw_map: RawImportMap = {}
        emitted: Set[str] = set()
        traversed: Set[str] = set()

        for entry in entries:
            if entry.is_remote_package:
                raw_map[entry.import_name] = {
                    "path": entry.url,
                    "type": entry.type.value,
                }
                continue

            asset = self._require_asset(entry)
            raw_map[entry.import_name] = {
                "path": asset.public_path,
                "type": entry.type.value,
            }
            emitted.add(asset.logical_path)

            if entry.type is ImportMapType.JS:
                self._add_implicit_entries(asset, entries, raw_map, emitted, traversed)

        return raw_map

    def _add_implicit_entries(
        self,
        asset: MappedAsset,
        entries: ImportMapEntries,
        raw_map: RawImportMap,
        emitted: Set[str],
        traversed: Set[str],
    ) -> None:
        if asset.logical_path in traversed:
            return
        traversed.add(asset.logical_path)

        for javascript_import in asset.javascript_imports:
            import_name = javascript_import.import_name
            target = javascript_import.asset

            if import_name in entries:
                # Resolved through the declared entry; only its children matter
                declared = entries.get(import_name)
                if declared.type is not ImportMapType.JS or declared.is_remote_package:
                    continue
                if target is None:
                    target = self._require_asset(declared)
                self._add_implicit_entries(target, entries, raw_map, emitted, traversed)
                continue

            if target is None:
                logger.debug("Import %r has no asset, leaving it to the browser", import_name)
                continue

            import_type = (
                ImportMapType.CSS
                if target.public_extension == ImportMapType.CSS.value
                else ImportMapType.JS
            )

            if (
                javascript_import.add_implicitly
                and import_name not in raw_map
                and target.logical_path not in emitted
            ):
                raw_map[import_name] = {
                    "path": target.public_path,
                    "type": import_type.value,
                }
                emitted.add(target.logical_path)
                logger.debug("Added implicit import map entry %r", import_name)

            if import_type is ImportMapType.JS:
                self._add_implicit_entries(target, entries, raw_map, emitted, traversed)

    # ------------------------------------------------------------------
    # Entrypoints
    # ------------------------------------------------------------------

    def entrypoint_asset(self, entries: ImportMapEntries, entrypoint_name: str) -> MappedAsset:
        """Return the asset behind a declared entrypoint.

        Raises:
            UnknownEntryError: No entry has that name.
            InvalidEntrypointError: The entry is not flagged as an
                entrypoint, or is a remote package.
            AssetNotFoundError: The entry's path has no asset.
        """
        if entrypoint_name not in entries:
            raise UnknownEntryError(
                f'The entrypoint "{entrypoint_name}" does not exist in the import map',
                import_name=entrypoint_name,
            )

        entry = entries.get(entrypoint_name)
        if not entry.is_entrypoint:
            raise InvalidEntrypointError(
                f'The entry "{entrypoint_name}" is not an entrypoint. '
                'Set "entrypoint": true to make it available as one.',
                import_name=entrypoint_name,
            )
        if entry.is_remote_package:
            raise InvalidEntrypointError(
                f'The entrypoint "{entrypoint_name}" is a remote package and '
                "cannot be used as an entrypoint.",
                import_name=entrypoint_name,
            )

        return self._require_asset(entry)

    def build_entrypoint_metadata(
        self,
        asset: MappedAsset,
        entries: Optional[ImportMapEntries] = None,
    ) -> List[str]:
        """Collect the import map keys ``asset`` eagerly depends on.

        Keys come out in depth-first pre-order, each at most once. Lazy
        imports are dropped together with everything below them. When
        ``entries`` is given, an import naming a declared local JavaScript
        entry without an asset of its own is followed through that entry.
        """
        keys: List[str] = []
        self._collect_eager_imports(asset, entries, keys, set(), set())
        return keys

    def _collect_eager_imports(
        self,
        asset: MappedAsset,
        entries: Optional[ImportMapEntries],
        keys: List[str],
        seen_keys: Set[str],
        traversed: Set[str],
    ) -> None:
        if asset.logical_path in traversed:
            return
        traversed.add(asset.logical_path)

        for javascript_import in asset.javascript_imports:
            if javascript_import.is_lazy:
                continue

            import_name = javascript_import.import_name
            if import_name not in seen_keys:
                seen_keys.add(import_name)
                keys.append(import_name)

            target = javascript_import.asset
            if target is None and entries is not None and import_name in entries:
                declared = entries.get(import_name)
                if declared.type is ImportMapType.JS and not declared.is_remote_package:
                    target = self._require_asset(declared)

            if target is not None and target.public_extension != ImportMapType.CSS.value:
                self._collect_eager_imports(target, entries, keys, seen_keys, traversed)

    # ------------------------------------------------------------------
    # Final import map
    # ------------------------------------------------------------------

    def build_import_map_data(
        self,
        raw_map: RawImportMap,
        entrypoints: Sequence[Tuple[str, Sequence[str]]],
    ) -> RawImportMap:
        """Reorder ``raw_map`` around the requested entrypoints.

        Args:
            raw_map: Output of :meth:`build_raw_map` (not modified).
            entrypoints: ``(entrypoint name, eager keys)`` pairs in the order
                the page loads them.

        Returns:
            Each entrypoint followed by its not-yet-placed eager dependencies
            (marked ``preload``), then every remaining raw entry in its
            original order. A dependency placed earlier keeps its position
            and gains ``preload``. Eager keys missing from the raw map are
            skipped.

        Raises:
            UnknownEntryError: An entrypoint is missing from the raw map.
        """
        final: RawImportMap = {}

        for entrypoint_name, eager_keys in entrypoints:
            if entrypoint_name not in raw_map:
                raise UnknownEntryError(
                    f'The entrypoint "{entrypoint_name}" is not in the import map',
                    import_name=entrypoint_name,
                )
            if entrypoint_name not in final:
                final[entrypoint_name] = dict(raw_map[entrypoint_name])

            for key in eager_keys:
                if key == entrypoint_name:
                    continue
                if key in final:
                    final[key]["preload"] = True
                    continue
                if key not in raw_map:
                    logger.debug(
                        "Eager import %r of %r is not in the import map",
                        key,
                        entrypoint_name,
                    )
                    continue
                final[key] = dict(raw_map[key], preload=True)

        for key, data in raw_map.items():
            if key not in final:
                final[key] = dict(data)

        return final
