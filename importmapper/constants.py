"""
Centralized constants for importmapper.

This module defines immutable configuration values used across
importmapper, including cache file names, CDN endpoints, network settings,
configuration defaults and logging formats. All values are intended to be
treated as read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "importmapper/{version}"

# ---------------------------------------------------------------------------
# Pre-rendered artifacts (cache short-circuit)
# ---------------------------------------------------------------------------

#: File name of the pre-rendered raw import map in the public directory.
IMPORT_MAP_CACHE_FILENAME: Final[str] = "importmap.json"

#: File name template of a pre-rendered entrypoint preload list.
ENTRYPOINT_CACHE_FILENAME_PATTERN: Final[str] = "entrypoint.{name}.json"

# ---------------------------------------------------------------------------
# CDN endpoints
# ---------------------------------------------------------------------------

#: jsDelivr data API used to resolve a version constraint to a version.
JSDELIVR_RESOLVE_URL: Final[str] = (
    "https://data.jsdelivr.com/v1/packages/npm/{package}/resolved"
)

#: jsDelivr CDN URL for a resolved package (optionally with a subpath).
JSDELIVR_PACKAGE_URL: Final[str] = "https://cdn.jsdelivr.net/npm/{package}@{version}"

#: Suffix asking jsDelivr to serve a JavaScript file as an ES module.
JSDELIVR_ESM_SUFFIX: Final[str] = "/+esm"

#: jspm.io CDN host (``/<registry>:<package>@<version>/<file>``).
JSPM_HOST: Final[str] = "ga.jspm.io"

#: jsDelivr CDN host (``/<registry>/<package>@<version>[/<subpath>]``).
JSDELIVR_HOST: Final[str] = "cdn.jsdelivr.net"

#: Hosts whose package URLs can be parsed back into their components.
KNOWN_CDN_HOSTS: Final[Sequence[str]] = (JSPM_HOST, JSDELIVR_HOST)

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Persisted entry list, relative to the project root.
DEFAULT_ENTRIES_FILE: Final[str] = "importmap.json"

#: Directories scanned for assets, relative to the project root.
DEFAULT_ASSET_DIRS: Final[Sequence[str]] = ("assets",)

#: URL prefix under which assets are served.
DEFAULT_PUBLIC_PREFIX: Final[str] = "/assets/"

#: Filesystem directory holding pre-rendered artifacts.
DEFAULT_PUBLIC_DIR: Final[str] = "public/assets"

#: Directory that receives vendored package files.
DEFAULT_VENDOR_DIR: Final[str] = "assets/vendor"

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
