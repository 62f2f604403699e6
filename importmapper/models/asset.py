"""
Asset pipeline models.

These are produced by an :class:`~importmapper.core.interfaces.AssetLookup`
implementation and only read by importmapper: a :class:`MappedAsset` is one
file known to the asset pipeline, and each of its
:class:`JavaScriptImport` records is one ``import`` found in that file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import List, Optional


@dataclass
class JavaScriptImport:
    """One import statement found in an asset.

    Attributes:
        import_name: The import's target as written into the import map: a
            bare module name (``"lodash"``) or the digest-stripped public
            path of the imported asset (``"/assets/simple.js"``).
        is_lazy: ``True`` for dynamic ``import()`` calls.
        asset: The imported asset, when the pipeline could resolve it.
        add_implicitly: Whether the import must be added to the import map
            under ``import_name`` because no declared entry covers it.
    """

    import_name: str
    is_lazy: bool = False
    asset: Optional["MappedAsset"] = None
    add_implicitly: bool = False


@dataclass(eq=False)
class MappedAsset:
    """A file known to the asset pipeline.

    Attributes:
        logical_path: Path of the asset inside the asset directories.
        source_path: Absolute filesystem path of the source file.
        public_path: Public, digest-stamped URL path.
        public_path_without_digest: Public URL path without the digest;
            defaults to ``public_path``.
        javascript_imports: Imports declared by the asset, in source order.
    """

    logical_path: str
    source_path: Optional[str] = None
    public_path: Optional[str] = None
    public_path_without_digest: Optional[str] = None
    javascript_imports: List[JavaScriptImport] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.public_path_without_digest is None:
            self.public_path_without_digest = self.public_path

    @property
    def public_extension(self) -> str:
        """Extension of the served file, without the dot (``"js"``)."""
        return PurePosixPath(self.logical_path).suffix.lstrip(".").lower()
