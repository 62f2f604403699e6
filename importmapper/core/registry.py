"""jsDelivr-backed registry resolver and content fetcher.

:class:`JsDelivrEsmResolver` resolves a batch of npm package requests with
one call: every version lookup (and, for downloads, every content fetch)
runs concurrently on a single :class:`~importmapper.utils.http.HTTPClient`
inside one event loop. JavaScript is served through jsDelivr's ``/+esm``
endpoint so bare imports inside the package are rewritten to CDN URLs; CSS
files are served raw.

Typical usage::

    resolver = JsDelivrEsmResolver(timeout=10)
    [resolved] = resolver.resolve([PackageRequireOptions("lodash", "^4.17")])
    resolved.url  # 'https://cdn.jsdelivr.net/npm/lodash@4.17.21/+esm'
"""

from __future__ import annotations

import asyncio
from typing import Callable, List, Optional, Sequence, Tuple

from importmapper.constants import (
    DEFAULT_TIMEOUT,
    JSDELIVR_ESM_SUFFIX,
    JSDELIVR_PACKAGE_URL,
    JSDELIVR_RESOLVE_URL,
)
from importmapper.exceptions import DownloadError, NetworkError, RegistryError
from importmapper.models.entry import ImportMapType
from importmapper.models.package import PackageRequireOptions, ResolvedPackage
from importmapper.utils.http import HTTPClient
from importmapper.utils.logger import get_logger

logger = get_logger("registry")

__all__ = ["HttpContentFetcher", "JsDelivrEsmResolver", "split_package_subpath"]

ClientFactory = Callable[[], HTTPClient]


def split_package_subpath(package_name: str) -> Tuple[str, str]:
    """Split ``[@scope/]name[/sub/path]`` into the package and its subpath.

    Example:
        >>> split_package_subpath("@popperjs/core/dist/umd/popper.js")
        ('@popperjs/core', '/dist/umd/popper.js')
        >>> split_package_subpath("lodash")
        ('lodash', '')
    """
    parts = package_name.split("/")
    size = 2 if package_name.startswith("@") else 1
    return "/".join(parts[:size]), "".join("/" + part for part in parts[size:])


class JsDelivrEsmResolver:
    """Resolves npm packages to jsDelivr URLs.

    Args:
        timeout: HTTP timeout in seconds.
        client_factory: Builds the HTTP client used for one ``resolve`` call.
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self.timeout = timeout
        self._client_factory = client_factory or (lambda: HTTPClient(timeout=self.timeout))

    def resolve(self, requests: Sequence[PackageRequireOptions]) -> List[ResolvedPackage]:
        """Resolve all ``requests`` in one go, in request order.

        Raises:
            RegistryError: A package or version could not be resolved, or
                its content could not be downloaded.
        """
        if not requests:
            return []
        return asyncio.run(self.resolve_async(requests))

    async def resolve_async(
        self, requests: Sequence[PackageRequireOptions]
    ) -> List[ResolvedPackage]:
        async with self._client_factory() as http:
            results = await asyncio.gather(
                *(self._resolve_package(http, request) for request in requests),
                return_exceptions=True,
            )

        resolved: List[ResolvedPackage] = []
        for result in results:
            if isinstance(result, BaseException):
                raise result
            resolved.append(result)
        return resolved

    async def _resolve_package(
        self,
        http: HTTPClient,
        request: PackageRequireOptions,
    ) -> ResolvedPackage:
        if request.registry not in (None, "", "npm"):
            raise RegistryError(
                f'jsDelivr only serves npm packages, not "{request.registry}"',
                package_name=request.package_name,
            )

        package, subpath = split_package_subpath(request.package_name)
        constraint = request.version_constraint or "latest"

        try:
            data = await http.get_json(
                JSDELIVR_RESOLVE_URL.format(package=package),
                params={"specifier": constraint},
            )
        except NetworkError as exc:
            raise RegistryError(
                f'Could not resolve "{package}@{constraint}": {exc.message}',
                package_name=package,
                url=exc.url,
                status_code=exc.status_code,
            ) from exc

        version = data.get("version")
        if not version:
            raise RegistryError(
                f'No version of "{package}" matches "{constraint}"',
                package_name=package,
            )
        logger.debug("Resolved %s@%s to %s", package, constraint, version)

        url = JSDELIVR_PACKAGE_URL.format(package=package, version=version) + subpath
        if ImportMapType.from_filename(subpath) is ImportMapType.JS:
            url += JSDELIVR_ESM_SUFFIX

        content: Optional[bytes] = None
        if request.download:
            try:
                content = await http.get_bytes(url)
            except NetworkError as exc:
                raise RegistryError(
                    f'Could not download "{package}@{version}": {exc.message}',
                    package_name=package,
                    url=url,
                    status_code=exc.status_code,
                ) from exc

        return ResolvedPackage(require_options=request, url=url, content=content)


class HttpContentFetcher:
    """Synchronous ``fetch(url) -> bytes`` over :class:`HTTPClient`."""

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self.timeout = timeout
        self._client_factory = client_factory or (lambda: HTTPClient(timeout=self.timeout))

    def fetch(self, url: str) -> bytes:
        """Download ``url``.

        Raises:
            DownloadError: The request failed.
        """
        try:
            return asyncio.run(self._fetch(url))
        except NetworkError as exc:
            raise DownloadError(
                f"Could not download {url}: {exc.message}",
                url=url,
                original_error=exc,
            ) from exc

    async def _fetch(self, url: str) -> bytes:
        async with self._client_factory() as http:
            return await http.get_bytes(url)
