"""
Core functionality exports for importmapper.

    from importmapper.core import ImportMapManager, GraphResolver
"""

from __future__ import annotations

from importmapper.core.graph import GraphResolver, RawImportMap
from importmapper.core.manager import ImportMapManager
from importmapper.core.entry_store import JsonEntryStore
from importmapper.core.lifecycle import PackageLifecycleCoordinator
from importmapper.core.asset_lookup import DirectoryAssetLookup, StaticPublicPath
from importmapper.core.registry import HttpContentFetcher, JsDelivrEsmResolver
from importmapper.core.specifier import PackageUrl, parse_package_name, parse_package_url
from importmapper.core.interfaces import (
    AssetLookup,
    ContentFetcher,
    EntryStore,
    PublicPathProbe,
    RegistryResolver,
)

__all__ = [
    "GraphResolver",
    "RawImportMap",
    "ImportMapManager",
    "PackageLifecycleCoordinator",
    "JsonEntryStore",
    "DirectoryAssetLookup",
    "StaticPublicPath",
    "JsDelivrEsmResolver",
    "HttpContentFetcher",
    "PackageUrl",
    "parse_package_name",
    "parse_package_url",
    # Collaborator protocols
    "AssetLookup",
    "ContentFetcher",
    "EntryStore",
    "PublicPathProbe",
    "RegistryResolver",
]
