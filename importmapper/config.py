"""Configuration file loader for importmapper.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``importmapper.toml``: settings under ``[importmapper]`` table
- ``pyproject.toml``: settings under ``[tool.importmapper]`` table

Discovery order:

1. Explicit path from ``--config`` or ``IMPORTMAPPER_CONFIG``
2. ``importmapper.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.importmapper]`` section

Relative paths in the file are resolved against the file's directory; with
no configuration file, against the current directory.

Example (``importmapper.toml``)::

    [importmapper]
    entries_file = "importmap.json"
    asset_dirs = ["assets", "node_assets"]
    public_prefix = "/static/"
    public_dir = "public/static"
    vendor_dir = "assets/vendor"
    timeout = 10
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from importmapper.exceptions import ConfigError
from importmapper.utils.logger import get_logger
from importmapper.constants import (
    DEFAULT_ASSET_DIRS,
    DEFAULT_ENTRIES_FILE,
    DEFAULT_PUBLIC_DIR,
    DEFAULT_PUBLIC_PREFIX,
    DEFAULT_TIMEOUT,
    DEFAULT_VENDOR_DIR,
)

logger = get_logger("config")


@dataclass
class ImportMapperConfig:
    """Parsed and validated importmapper configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        entries_file: JSON file holding the declared entries.
        asset_dirs: Directories whose files are assets.
        public_prefix: URL prefix assets are served under.
        public_dir: Directory receiving pre-rendered import map files.
        vendor_dir: Directory receiving vendored packages; must be inside
            one of ``asset_dirs``.
        timeout: HTTP timeout in seconds.
        base_dir: Directory relative paths are resolved against.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    entries_file: str = DEFAULT_ENTRIES_FILE
    asset_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_ASSET_DIRS))
    public_prefix: str = DEFAULT_PUBLIC_PREFIX
    public_dir: str = DEFAULT_PUBLIC_DIR
    vendor_dir: str = DEFAULT_VENDOR_DIR
    timeout: int = DEFAULT_TIMEOUT

    # Metadata (not user-facing options)
    base_dir: Path = field(default_factory=lambda: Path.cwd(), repr=False)
    source_path: Optional[Path] = field(default=None, repr=False)

    @property
    def entries_path(self) -> Path:
        return self.base_dir / self.entries_file

    @property
    def asset_paths(self) -> List[Path]:
        return [self.base_dir / asset_dir for asset_dir in self.asset_dirs]

    @property
    def public_path(self) -> Path:
        return self.base_dir / self.public_dir

    @property
    def vendor_path(self) -> Path:
        return self.base_dir / self.vendor_dir

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "entries_file": self.entries_file,
            "asset_dirs": self.asset_dirs,
            "public_prefix": self.public_prefix,
            "public_dir": self.public_dir,
            "vendor_dir": self.vendor_dir,
            "timeout": self.timeout,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    importmapper_toml = cwd / "importmapper.toml"
    if importmapper_toml.is_file():
        logger.debug("Found importmapper.toml: %s", importmapper_toml)
        return importmapper_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_importmapper_section(pyproject_toml):
        logger.debug("Found [tool.importmapper] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_importmapper_section(path: Path) -> bool:
    """Check if pyproject.toml contains a [tool.importmapper] section.

    Parse errors count as "no section" so a broken pyproject.toml does not
    block running with defaults.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "importmapper" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> ImportMapperConfig:
    """Load and validate importmapper configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`ImportMapperConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return ImportMapperConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("importmapper", {})
    else:
        section = raw.get("importmapper", {})

    config = _parse_section(section, config_path=str(resolved))
    config.base_dir = resolved.parent
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is invalid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


_STRING_OPTIONS = ("entries_file", "public_prefix", "public_dir", "vendor_dir")


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> ImportMapperConfig:
    """Parse and validate the ``[importmapper]`` table.

    Raises:
        ConfigError: Unknown keys or incorrect types.
    """
    config = ImportMapperConfig()

    known = set(_STRING_OPTIONS) | {"asset_dirs", "timeout"}
    unknown = set(section) - known
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    for option in _STRING_OPTIONS:
        if option not in section:
            continue
        val = section[option]
        if not isinstance(val, str) or not val:
            raise ConfigError(
                f"{option} must be a non-empty string, got {val!r}",
                config_path=config_path,
                option=option,
            )
        setattr(config, option, val)

    if "asset_dirs" in section:
        val = section["asset_dirs"]
        if (
            not isinstance(val, list)
            or not val
            or not all(isinstance(item, str) and item for item in val)
        ):
            raise ConfigError(
                "asset_dirs must be a non-empty list of strings",
                config_path=config_path,
                option="asset_dirs",
            )
        config.asset_dirs = list(val)

    if "timeout" in section:
        val = section["timeout"]
        # bool is an int subclass
        if isinstance(val, bool) or not isinstance(val, int) or val <= 0:
            raise ConfigError(
                f"timeout must be a positive integer, got {val!r}",
                config_path=config_path,
                option="timeout",
            )
        config.timeout = val

    return config
