"""JSON-file persistence for the declared import map entries.

The file is a single JSON object keyed by import name, in import map order::

    {
        "app": {"path": "./assets/app.js", "entrypoint": true},
        "lodash": {"url": "https://cdn.jsdelivr.net/npm/lodash@4.17.21/+esm",
                   "downloaded_to": "vendor/lodash.js"}
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Union

from importmapper.exceptions import ConfigError
from importmapper.models.entry import ImportMapEntries, ImportMapEntry
from importmapper.utils.filesystem import safe_read_file, safe_write_file
from importmapper.utils.logger import get_logger

logger = get_logger("entry_store")


class JsonEntryStore:
    """Reads and atomically rewrites an ``importmap.json`` entry file.

    The project root used for ``./`` paths is the file's directory. A file
    that does not exist yet reads as an empty entry list.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path).absolute()

    def root_directory(self) -> Path:
        return self.path.parent

    def read(self) -> ImportMapEntries:
        """Load the entries.

        Raises:
            ConfigError: The file is not a JSON object of valid entries.
        """
        if not self.path.exists():
            logger.debug("%s does not exist, starting with no entries", self.path)
            return ImportMapEntries()

        try:
            data = json.loads(safe_read_file(self.path))
        except json.JSONDecodeError as exc:
            raise ConfigError(
                f"Invalid JSON in import map file: {exc}",
                config_path=str(self.path),
            ) from exc

        if not isinstance(data, dict):
            raise ConfigError(
                "The import map file must contain a JSON object",
                config_path=str(self.path),
            )

        entries = ImportMapEntries()
        for import_name, options in data.items():
            if not isinstance(options, dict):
                raise ConfigError(
                    f'Entry "{import_name}" must be a JSON object',
                    config_path=str(self.path),
                    option=import_name,
                )
            try:
                entries.add(ImportMapEntry.from_config(import_name, options))
            except ValueError as exc:
                raise ConfigError(
                    str(exc),
                    config_path=str(self.path),
                    option=import_name,
                ) from exc

        return entries

    def write(self, entries: ImportMapEntries) -> None:
        data = {entry.import_name: entry.to_config() for entry in entries}
        safe_write_file(self.path, json.dumps(data, indent=4) + "\n")
        logger.info("Wrote %d entries to %s", len(entries), self.path)
