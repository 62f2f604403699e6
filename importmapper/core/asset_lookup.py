"""Filesystem-backed asset lookup.

A minimal stand-in for a full asset pipeline: files under the configured
asset directories are served as-is under a public URL prefix. There is no
digest stamping and no import discovery, so every asset's import list is
empty and ``public_path`` equals ``public_path_without_digest``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Sequence, Union

from importmapper.constants import DEFAULT_PUBLIC_PREFIX
from importmapper.models.asset import MappedAsset

PathLike = Union[str, Path]


class DirectoryAssetLookup:
    """Maps files under ``asset_dirs`` to logical and public paths.

    The logical path of ``<asset dir>/vendor/lodash.js`` is
    ``vendor/lodash.js`` and its public path ``<public_prefix>vendor/lodash.js``.
    When the same logical path exists in several directories, the first
    directory wins.

    Example:
        >>> lookup = DirectoryAssetLookup(["assets"], public_prefix="/static/")
        >>> lookup.by_logical_path("app.js").public_path
        '/static/app.js'
    """

    def __init__(
        self,
        asset_dirs: Sequence[PathLike],
        public_prefix: str = DEFAULT_PUBLIC_PREFIX,
    ) -> None:
        self.asset_dirs: List[Path] = [Path(os.path.abspath(d)) for d in asset_dirs]
        self.public_prefix = public_prefix if public_prefix.endswith("/") else public_prefix + "/"

    def by_logical_path(self, logical_path: str) -> Optional[MappedAsset]:
        for asset_dir in self.asset_dirs:
            candidate = asset_dir / logical_path
            if candidate.is_file():
                return self._mapped_asset(logical_path, candidate)
        return None

    def by_source_path(self, source_path: str) -> Optional[MappedAsset]:
        path = Path(os.path.abspath(source_path))
        if not path.is_file():
            return None

        for asset_dir in self.asset_dirs:
            try:
                relative = path.relative_to(asset_dir)
            except ValueError:
                continue
            return self._mapped_asset(relative.as_posix(), path)
        return None

    def _mapped_asset(self, logical_path: str, source_path: Path) -> MappedAsset:
        return MappedAsset(
            logical_path=logical_path,
            source_path=str(source_path),
            public_path=self.public_prefix + logical_path,
        )


class StaticPublicPath:
    """Public directory fixed at construction."""

    def __init__(self, path: PathLike) -> None:
        self.path = Path(path)

    def public_filesystem_path(self) -> Path:
        return self.path
