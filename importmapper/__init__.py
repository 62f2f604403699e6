"""
importmapper: import map management for bundler-free JavaScript.

importmapper keeps a declared list of JavaScript/CSS modules (local files
and npm packages served from a CDN or vendored locally) and turns it into
the import map a browser needs, including every implicit dependency and the
``modulepreload`` hints of each page entrypoint.

Features include:
    • Recursive, cycle-safe dependency discovery through the asset pipeline
    • Per-entrypoint preload ordering
    • require / remove / update of npm packages through jsDelivr
    • Vendoring packages locally and repairing missing vendor files
    • Pre-rendered import map files for production
"""

from __future__ import annotations

from importmapper.__version__ import __version__
from importmapper.core.manager import ImportMapManager

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__license__ = "Apache-2.0"
__description__ = "Import map generation and npm package vendoring for bundler-free front ends."

__all__ = [
    "__version__",
    "ImportMapManager",
]
