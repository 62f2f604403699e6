"""Package lifecycle: require, remove, update and repair.

:class:`PackageLifecycleCoordinator` keeps three things consistent: the
persisted entry list, the vendored files on disk and the registry's answers.

Every mutating operation reads the entries once, does all registry and
filesystem work, and then calls ``EntryStore.write`` exactly once. Vendored
files written (or deleted) on the way are tracked by a
:class:`_VendorTransaction`; if anything fails before the entry list is
persisted, those files are put back the way they were and the error
propagates. Nothing is half-applied.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from typing import Dict, Iterator, List, Optional, Sequence, Union

from importmapper.constants import JSDELIVR_HOST
from importmapper.core.graph import GraphResolver
from importmapper.core.interfaces import (
    AssetLookup,
    ContentFetcher,
    EntryStore,
    RegistryResolver,
)
from importmapper.core.specifier import parse_package_url
from importmapper.exceptions import (
    DownloadError,
    FileOperationError,
    ImportMapperError,
    UnknownEntryError,
)
from importmapper.models.entry import ImportMapEntries, ImportMapEntry, ImportMapType
from importmapper.models.package import (
    PackageRequireOptions,
    PackageUpdate,
    ResolvedPackage,
)
from importmapper.utils.filesystem import (
    read_bytes_if_exists,
    relative_to_root,
    remove_file,
    validate_path,
    write_bytes,
)
from importmapper.utils.logger import get_logger

logger = get_logger("lifecycle")

__all__ = ["PackageLifecycleCoordinator"]


class _VendorTransaction:
    """Remembers the original bytes of every vendored file it touches."""

    def __init__(self) -> None:
        self._originals: Dict[Path, Optional[bytes]] = {}

    def _remember(self, path: Path) -> None:
        if path not in self._originals:
            self._originals[path] = read_bytes_if_exists(path)

    def write(self, path: Path, content: bytes) -> None:
        self._remember(path)
        write_bytes(path, content)

    def delete(self, path: Path) -> None:
        self._remember(path)
        remove_file(path)

    def rollback(self) -> None:
        for path, original in reversed(list(self._originals.items())):
            try:
                if original is None:
                    remove_file(path)
                else:
                    write_bytes(path, original)
            except FileOperationError as exc:
                logger.error("Could not restore %s: %s", path, exc)
                continue
            logger.debug("Restored %s", path)


class PackageLifecycleCoordinator:
    """Orchestrates the package-level operations on the entry list.

    Args:
        entry_store: Reads and writes the declared entries.
        asset_lookup: Asset pipeline used to locate vendored files.
        resolver: Registry resolver (one call per batch of packages).
        fetcher: Downloads vendored files for :meth:`download_missing_packages`.
        vendor_dir: Directory that receives vendored files. It must live
            inside one of the asset pipeline's directories.
    """

    def __init__(
        self,
        entry_store: EntryStore,
        asset_lookup: AssetLookup,
        resolver: RegistryResolver,
        fetcher: ContentFetcher,
        vendor_dir: Union[str, Path],
    ) -> None:
        self.entry_store = entry_store
        self.asset_lookup = asset_lookup
        self.resolver = resolver
        self.fetcher = fetcher
        self.vendor_dir = Path(vendor_dir)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def require(self, packages: Sequence[PackageRequireOptions]) -> List[ImportMapEntry]:
        """Add packages (or local files) to the import map.

        Requests carrying a ``path`` become local entries without asking the
        registry; all the others are resolved in a single registry call.
        Entries come out in request order for local files, then in the
        registry's response order. Same-named existing entries are replaced
        in place.

        Returns:
            The entries that were added or replaced.

        Raises:
            RegistryError: The registry could not resolve the batch.
            DownloadError: A requested download could not be vendored.
        """
        entries = self.entry_store.read()
        root = self.entry_store.root_directory()

        added: List[ImportMapEntry] = []
        remote: List[PackageRequireOptions] = []
        for options in packages:
            if options.path is None:
                remote.append(options)
                continue
            path = relative_to_root(options.path, root)
            added.append(
                ImportMapEntry(
                    import_name=options.effective_import_name,
                    path=path,
                    type=ImportMapType.from_filename(path),
                    is_entrypoint=options.entrypoint,
                )
            )

        with self._vendoring() as transaction:
            if remote:
                for resolved in self._resolve(remote):
                    added.append(self._entry_from_resolved(resolved, transaction))

            self._delete_replaced_files(entries, added, transaction)
            self.entry_store.write(entries.with_changes(added=added))

        for entry in added:
            logger.info("Required %s", entry.import_name)
        return added

    def remove(self, import_names: Sequence[str]) -> None:
        """Remove entries, deleting the vendored files of downloaded ones.

        Raises:
            UnknownEntryError: A name is not in the import map. Nothing is
                changed in that case.
        """
        entries = self.entry_store.read()
        removed = [entries.get(name) for name in import_names]

        self.entry_store.write(entries.with_changes(removed=import_names))

        for entry in removed:
            logger.info("Removed %s", entry.import_name)
            if entry.is_downloaded:
                self._delete_vendored_file(entry)

    def update(self, import_names: Optional[Sequence[str]] = None) -> List[PackageUpdate]:
        """Re-resolve remote packages to their latest matching versions.

        Args:
            import_names: Entries to update; every entry with a URL when
                empty or ``None``.

        Returns:
            One :class:`PackageUpdate` per updated entry, in entry order.

        Raises:
            UnknownEntryError: A named entry does not exist or has no URL.
            RegistryError: The registry could not resolve the batch.
            DownloadError: A downloaded package could not be vendored again.
        """
        entries = self.entry_store.read()

        if import_names:
            targets = []
            for name in import_names:
                entry = entries.get(name)
                if not entry.has_url:
                    raise UnknownEntryError(
                        f'The entry "{name}" is not a remote package and cannot be updated',
                        import_name=name,
                    )
                targets.append(entry)
        else:
            targets = [entry for entry in entries if entry.has_url]

        if not targets:
            logger.info("Nothing to update")
            return []

        requests = [self._update_request(entry) for entry in targets]

        with self._vendoring() as transaction:
            current = [
                self._entry_from_resolved(resolved, transaction)
                for resolved in self._resolve(requests)
            ]
            self._delete_replaced_files(entries, current, transaction)
            self.entry_store.write(entries.with_changes(added=current))

        return [
            PackageUpdate(previous=entries.get(entry.import_name), current=entry)
            for entry in current
            if entry.import_name in entries
        ]

    def download_missing_packages(self) -> List[ImportMapEntry]:
        """Re-download vendored files that went missing.

        Only downloaded entries whose file no longer resolves through the
        asset pipeline are fetched again, from their persisted URL, and
        written to the file their stored path points at. The entry list is not rewritten and the registry is not contacted. A
        failing entry is logged and skipped so the others still get
        repaired.

        Returns:
            The entries whose file was downloaded again.
        """
        graph = GraphResolver(self.asset_lookup, self.entry_store.root_directory())
        repaired: List[ImportMapEntry] = []

        for entry in self.entry_store.read():
            if not entry.is_downloaded:
                continue
            assert entry.path is not None and entry.url is not None
            if graph.find_asset(entry.path) is not None:
                continue

            logger.info("Downloading missing %s from %s", entry.import_name, entry.url)
            try:
                content = self.fetcher.fetch(entry.url)
                with self._vendoring() as transaction:
                    transaction.write(self._missing_vendor_file(entry), content)
                    if graph.find_asset(entry.path) is None:
                        raise DownloadError(
                            f'The downloaded file of "{entry.import_name}" does not '
                            f'resolve as "{entry.path}"',
                            import_name=entry.import_name,
                            url=entry.url,
                        )
            except ImportMapperError as exc:
                logger.error("Could not download %s: %s", entry.import_name, exc)
                continue
            repaired.append(entry)

        return repaired

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _vendoring(self) -> Iterator[_VendorTransaction]:
        transaction = _VendorTransaction()
        try:
            yield transaction
        except Exception:
            logger.debug("Operation failed, rolling back vendored files")
            transaction.rollback()
            raise

    def _resolve(self, requests: Sequence[PackageRequireOptions]) -> List[ResolvedPackage]:
        logger.debug(
            "Resolving %s",
            ", ".join(request.package_name for request in requests),
        )
        return list(self.resolver.resolve(requests))

    def _update_request(self, entry: ImportMapEntry) -> PackageRequireOptions:
        assert entry.url is not None
        package_name = entry.import_name
        registry: Optional[str] = None

        parsed = parse_package_url(entry.url)
        if parsed is not None:
            package_name = parsed.package
            registry = parsed.registry
            # jsDelivr subpaths select a file inside the package
            if parsed.host == JSDELIVR_HOST and parsed.subpath:
                package_name += parsed.subpath

        return PackageRequireOptions(
            package_name=package_name,
            download=entry.is_downloaded,
            import_name=entry.import_name,
            registry=registry,
            entrypoint=entry.is_entrypoint,
        )

    def _entry_from_resolved(
        self,
        resolved: ResolvedPackage,
        transaction: _VendorTransaction,
    ) -> ImportMapEntry:
        options = resolved.require_options
        import_type = ImportMapType.from_filename(resolved.url)

        if not options.download:
            return ImportMapEntry(
                import_name=resolved.import_name,
                url=resolved.url,
                type=import_type,
                is_entrypoint=options.entrypoint,
            )

        if resolved.content is None:
            raise DownloadError(
                f'The registry returned no content for "{resolved.import_name}"',
                import_name=resolved.import_name,
                url=resolved.url,
            )

        target = self._vendor_file(resolved.import_name, import_type)
        try:
            transaction.write(target, resolved.content)
        except FileOperationError as exc:
            raise DownloadError(
                f'Could not write "{resolved.import_name}" to {target}',
                import_name=resolved.import_name,
                url=resolved.url,
                original_error=exc,
            ) from exc

        asset = self.asset_lookup.by_source_path(str(target))
        if asset is None:
            raise DownloadError(
                f'The vendor file {target} is not inside any asset directory',
                import_name=resolved.import_name,
                url=resolved.url,
            )

        logger.info("Downloaded %s to %s", resolved.import_name, asset.logical_path)
        return ImportMapEntry(
            import_name=resolved.import_name,
            path=asset.logical_path,
            url=resolved.url,
            type=import_type,
            is_entrypoint=options.entrypoint,
            is_downloaded=True,
        )

    def _vendor_file(self, import_name: str, import_type: ImportMapType) -> Path:
        """Return where a package is vendored: ``<vendor_dir>/<import name>[.ext]``."""
        filename = import_name
        extension = f".{import_type.value}"
        if not filename.endswith(extension):
            filename += extension

        target = self.vendor_dir / filename
        try:
            validate_path(target, base_dir=self.vendor_dir)
        except FileOperationError as exc:
            raise DownloadError(
                f'Import name "{import_name}" points outside the vendor directory',
                import_name=import_name,
                original_error=exc,
            ) from exc
        return target

    def _missing_vendor_file(self, entry: ImportMapEntry) -> Path:
        """Return the file a downloaded entry's path points at.

        Source paths are used as they are. A logical path is placed under
        the asset directory that holds the vendor directory, found by
        matching the path's leading segments against the vendor
        directory's own trailing segments; the longest match wins.

        Raises:
            DownloadError: The file would land outside the vendor directory.
        """
        assert entry.path is not None
        path = entry.path
        vendor_dir = Path(os.path.abspath(self.vendor_dir))

        if path.startswith(("./", "../")):
            target = Path(os.path.normpath(os.path.join(self.entry_store.root_directory(), path)))
        elif os.path.isabs(path):
            target = Path(os.path.normpath(path))
        else:
            parts = PurePosixPath(path).parts
            target = vendor_dir.joinpath(*parts)
            for base in vendor_dir.parents:
                prefix = vendor_dir.relative_to(base).parts
                if len(parts) > len(prefix) and parts[: len(prefix)] == prefix:
                    target = base.joinpath(*parts)

        try:
            validate_path(target, base_dir=vendor_dir)
        except FileOperationError as exc:
            raise DownloadError(
                f'The path "{path}" of "{entry.import_name}" is outside the vendor directory',
                import_name=entry.import_name,
                url=entry.url,
                original_error=exc,
            ) from exc
        return target

    def _delete_replaced_files(
        self,
        previous: ImportMapEntries,
        current: Sequence[ImportMapEntry],
        transaction: _VendorTransaction,
    ) -> None:
        """Delete vendored files left behind by entries that moved."""
        for entry in current:
            if entry.import_name not in previous:
                continue
            old = previous.get(entry.import_name)
            if not old.is_downloaded or (entry.is_downloaded and entry.path == old.path):
                continue

            source_path = self._vendored_source_path(old)
            if source_path is None:
                continue
            transaction.delete(source_path)
            logger.info("Deleted old vendor file %s", source_path)

    def _delete_vendored_file(self, entry: ImportMapEntry) -> None:
        source_path = self._vendored_source_path(entry)
        if source_path is None:
            return
        try:
            remove_file(source_path)
        except FileOperationError as exc:
            logger.warning("Could not delete %s: %s", source_path, exc)
            return
        logger.info("Deleted vendor file %s", source_path)

    def _vendored_source_path(self, entry: ImportMapEntry) -> Optional[Path]:
        assert entry.path is not None
        graph = GraphResolver(self.asset_lookup, self.entry_store.root_directory())
        asset = graph.find_asset(entry.path)
        if asset is None or asset.source_path is None:
            logger.warning(
                'Vendor file of "%s" (%s) not found, skipping delete',
                entry.import_name,
                entry.path,
            )
            return None
        return Path(asset.source_path)
