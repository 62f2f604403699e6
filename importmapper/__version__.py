"""
importmapper version information.

Single source of truth for the package version, read by the packaging
metadata, the CLI ``--version`` flag and the HTTP User-Agent header.
"""

from __future__ import annotations

__version__ = "0.1.0"

#: Human-readable version (for CLI banners and debug logs).
VERSION_STRING = f"importmapper {__version__}"
