"""
Unified data model exports for importmapper.

Example:
    >>> from importmapper.models import ImportMapEntry, ImportMapEntries
"""

from __future__ import annotations

from importmapper.models.asset import JavaScriptImport, MappedAsset
from importmapper.models.entry import ImportMapEntries, ImportMapEntry, ImportMapType
from importmapper.models.package import (
    PackageRequireOptions,
    PackageSpecifier,
    PackageUpdate,
    ResolvedPackage,
)

__all__ = [
    "ImportMapEntry",
    "ImportMapEntries",
    "ImportMapType",
    "JavaScriptImport",
    "MappedAsset",
    "PackageRequireOptions",
    "PackageSpecifier",
    "PackageUpdate",
    "ResolvedPackage",
]
