"""Package specifier and CDN URL parsing.

Two pure helpers:

* :func:`parse_package_name` turns a command-line package string of the form
  ``[registry:]package[@version][=alias]`` into a :class:`PackageSpecifier`.
  Scoped names (``@hotwired/stimulus``) keep their leading ``@``; only the
  *next* ``@`` starts the version.
* :func:`parse_package_url` recovers registry, package, version and subpath
  from a CDN URL previously written to the import map, so that ``update``
  can ask the registry for the same package again.

Typical usage::

    >>> parse_package_name("npm:@scope/name@^1.2.3=alias")
    PackageSpecifier(package='@scope/name', registry='npm', version='^1.2.3', alias='alias')
    >>> parse_package_url("https://ga.jspm.io/npm:lodash@1.2.3/lodash.js").version
    '1.2.3'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

from importmapper.constants import JSDELIVR_ESM_SUFFIX, JSPM_HOST, KNOWN_CDN_HOSTS
from importmapper.exceptions import InvalidSpecifierError
from importmapper.models.package import PackageSpecifier

__all__ = ["PackageUrl", "parse_package_name", "parse_package_url"]

# ``name`` or ``@scope/name``, optionally followed by a subpath
_PACKAGE_RE = re.compile(r"^(?:@[^\s/@=:]+/)?[^\s@=:/][^\s@=:]*$")

_URL_PATH_RE = re.compile(
    r"^(?P<package>(?:@[\w.-]+/)?[\w.-]+)"
    r"(?:@(?P<version>[\w.+-]+))?"
    r"(?P<subpath>/.*)?$"
)


@dataclass(frozen=True)
class PackageUrl:
    """Components of a CDN package URL."""

    registry: str
    package: str
    version: Optional[str]
    subpath: Optional[str]
    host: str = ""


def parse_package_name(spec: str) -> PackageSpecifier:
    """Parse ``[registry:]package[@version][=alias]``.

    Args:
        spec: The specifier string.

    Returns:
        The parsed specifier. Missing version/alias are ``None``, a missing
        registry is ``""``.

    Raises:
        InvalidSpecifierError: Empty or malformed specifier.
    """
    if not spec or not spec.strip():
        raise InvalidSpecifierError("Package specifier is empty", specifier=spec)

    rest = spec.strip()

    registry = ""
    if ":" in rest:
        registry, _, rest = rest.partition(":")
        if not registry:
            raise InvalidSpecifierError(
                "Registry prefix is empty", specifier=spec
            )

    alias: Optional[str] = None
    if "=" in rest:
        rest, _, alias = rest.rpartition("=")
        if not alias:
            raise InvalidSpecifierError("Alias after '=' is empty", specifier=spec)

    # A leading "@" belongs to the scope, not to the version
    version_at = rest.find("@", 1 if rest.startswith("@") else 0)
    version: Optional[str] = None
    if version_at != -1:
        rest, version = rest[:version_at], rest[version_at + 1 :]
        version = version or None

    if not _PACKAGE_RE.match(rest):
        raise InvalidSpecifierError(
            f'Invalid package name "{rest}"', specifier=spec
        )
    if version is not None and re.search(r"[\s=]", version):
        raise InvalidSpecifierError(
            f'Invalid version constraint "{version}"', specifier=spec
        )

    return PackageSpecifier(
        package=rest,
        registry=registry,
        version=version,
        alias=alias,
    )


def parse_package_url(url: str) -> Optional[PackageUrl]:
    """Split a known CDN URL into its package components.

    Understands ``https://ga.jspm.io/<registry>:<package>@<version>/<file>``
    and ``https://cdn.jsdelivr.net/<registry>/<package>@<version>[/<file>]``
    (a trailing ``/+esm`` is not part of the subpath).

    Returns:
        The components, or ``None`` for any other URL.
    """
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or parts.hostname not in KNOWN_CDN_HOSTS:
        return None

    path = parts.path.lstrip("/")
    if path.endswith(JSDELIVR_ESM_SUFFIX):
        path = path[: -len(JSDELIVR_ESM_SUFFIX)]

    if parts.hostname == JSPM_HOST:
        registry, sep, path = path.partition(":")
    else:
        registry, sep, path = path.partition("/")
    if not sep or not registry:
        return None

    match = _URL_PATH_RE.match(path)
    if match is None:
        return None

    return PackageUrl(
        registry=registry,
        package=match.group("package"),
        version=match.group("version"),
        subpath=match.group("subpath") or None,
        host=parts.hostname,
    )
