"""
Package models used by the require/update workflow.

A :class:`PackageRequireOptions` is what the caller asks for, a
:class:`ResolvedPackage` is what the registry answered, and a
:class:`PackageSpecifier` is the parsed form of a command-line package
string such as ``npm:@hotwired/stimulus@^3.2=stimulus``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from importmapper.models.entry import ImportMapEntry


@dataclass(frozen=True)
class PackageSpecifier:
    """Parsed ``[registry:]package[@version][=alias]`` string."""

    package: str
    registry: str = ""
    version: Optional[str] = None
    alias: Optional[str] = None


@dataclass
class PackageRequireOptions:
    """A request to add (or re-resolve) one package.

    Attributes:
        package_name: Package name, optionally with a subpath
            (``bootstrap/dist/css/bootstrap.min.css``).
        version_constraint: Version or range to resolve, latest when ``None``.
        download: Vendor the resolved content locally.
        import_name: Import map key; defaults to ``package_name``.
        registry: Registry hint (``npm``, ``gh``...) for CDNs that need one.
        path: Local file to declare instead of resolving remotely.
        entrypoint: Declare the new entry as an entrypoint.
    """

    package_name: str
    version_constraint: Optional[str] = None
    download: bool = False
    import_name: Optional[str] = None
    registry: Optional[str] = None
    path: Optional[str] = None
    entrypoint: bool = False

    @property
    def effective_import_name(self) -> str:
        return self.import_name or self.package_name

    @classmethod
    def from_specifier(
        cls,
        specifier: PackageSpecifier,
        *,
        download: bool = False,
        path: Optional[str] = None,
        entrypoint: bool = False,
    ) -> "PackageRequireOptions":
        """Build require options from a parsed command-line specifier."""
        return cls(
            package_name=specifier.package,
            version_constraint=specifier.version,
            download=download,
            import_name=specifier.alias,
            registry=specifier.registry or None,
            path=path,
            entrypoint=entrypoint,
        )


@dataclass
class ResolvedPackage:
    """Registry answer for one requested package.

    ``content`` is only set when the request asked for ``download``.
    """

    require_options: PackageRequireOptions
    url: str
    content: Optional[bytes] = None

    @property
    def import_name(self) -> str:
        return self.require_options.effective_import_name


@dataclass
class PackageUpdate:
    """Before/after snapshot of one entry touched by ``update``."""

    previous: ImportMapEntry
    current: ImportMapEntry

    @property
    def import_name(self) -> str:
        return self.current.import_name
