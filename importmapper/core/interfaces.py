"""Collaborator contracts consumed by the import map core.

The graph resolver, the package lifecycle coordinator and the manager
facade never talk to the asset pipeline, the disk, the registry or the
network directly; they go through these protocols. Default implementations
live in :mod:`importmapper.core.entry_store`,
:mod:`importmapper.core.asset_lookup` and :mod:`importmapper.core.registry`.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from importmapper.models.asset import MappedAsset
from importmapper.models.entry import ImportMapEntries
from importmapper.models.package import PackageRequireOptions, ResolvedPackage

__all__ = [
    "AssetLookup",
    "ContentFetcher",
    "EntryStore",
    "PublicPathProbe",
    "RegistryResolver",
]


@runtime_checkable
class AssetLookup(Protocol):
    """Read access to the asset pipeline.

    Both methods return ``None`` (never raise) for unknown paths.
    """

    def by_logical_path(self, logical_path: str) -> Optional[MappedAsset]:
        ...

    def by_source_path(self, source_path: str) -> Optional[MappedAsset]:
        ...


@runtime_checkable
class EntryStore(Protocol):
    """Persistence of the declared entries; ``write`` replaces everything."""

    def read(self) -> ImportMapEntries:
        ...

    def write(self, entries: ImportMapEntries) -> None:
        ...

    def root_directory(self) -> Path:
        ...


@runtime_checkable
class PublicPathProbe(Protocol):
    """Location of the public directory holding pre-rendered artifacts."""

    def public_filesystem_path(self) -> Path:
        ...


@runtime_checkable
class RegistryResolver(Protocol):
    """Turns package requests into CDN URLs (and content when downloading).

    One call resolves a whole batch; a single request may yield several
    resolved packages.
    """

    def resolve(
        self, requests: Sequence[PackageRequireOptions]
    ) -> List[ResolvedPackage]:
        ...


@runtime_checkable
class ContentFetcher(Protocol):
    """Downloads the bytes behind a URL."""

    def fetch(self, url: str) -> bytes:
        ...
