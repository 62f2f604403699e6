from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import pytest

from importmapper.models import ImportMapEntries, ImportMapEntry, MappedAsset


class InMemoryAssetLookup:
    """Asset pipeline double answering from a fixed list of assets."""

    def __init__(self, assets: Iterable[MappedAsset] = ()) -> None:
        self.assets: List[MappedAsset] = list(assets)
        self.source_calls: List[str] = []

    def by_logical_path(self, logical_path: str) -> Optional[MappedAsset]:
        for asset in self.assets:
            if asset.logical_path == logical_path:
                return asset
        return None

    def by_source_path(self, source_path: str) -> Optional[MappedAsset]:
        self.source_calls.append(source_path)
        wanted = os.path.normpath(source_path)
        for asset in self.assets:
            if asset.source_path and os.path.normpath(asset.source_path) == wanted:
                return asset
        return None


class InMemoryEntryStore:
    """Entry store double that records every write."""

    def __init__(self, entries: Iterable[ImportMapEntry] = (), root: Path = Path("/fake/root")) -> None:
        self.entries = ImportMapEntries(entries)
        self.root = root
        self.writes: List[ImportMapEntries] = []

    def read(self) -> ImportMapEntries:
        return ImportMapEntries(self.entries)

    def write(self, entries: ImportMapEntries) -> None:
        self.writes.append(entries)
        self.entries = ImportMapEntries(entries)

    def root_directory(self) -> Path:
        return self.root


@pytest.fixture
def asset_lookup() -> Callable[..., InMemoryAssetLookup]:
    """Factory building an :class:`InMemoryAssetLookup` from assets."""

    def _build(*assets: MappedAsset) -> InMemoryAssetLookup:
        return InMemoryAssetLookup(assets)

    return _build


@pytest.fixture
def entry_store() -> Callable[..., InMemoryEntryStore]:
    """Factory building an :class:`InMemoryEntryStore` from entries."""

    def _build(*entries: ImportMapEntry, root: Path = Path("/fake/root")) -> InMemoryEntryStore:
        return InMemoryEntryStore(entries, root=root)

    return _build


@pytest.fixture(autouse=True)
def reset_importmapper_logging():
    """Undo ``setup_logging`` so caplog sees records in every test."""
    yield
    root = logging.getLogger("importmapper")
    root.handlers.clear()
    root.propagate = True
    root.setLevel(logging.NOTSET)
