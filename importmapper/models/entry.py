"""
Import map entry models.

An :class:`ImportMapEntry` is one line of the declared import map; an
:class:`ImportMapEntries` collection is the ordered, name-keyed set that is
read from and written back to the entry store as a whole. Insertion order is
meaningful: it drives the order of the generated import map.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from importmapper.exceptions import UnknownEntryError


class ImportMapType(str, Enum):
    """Kind of module an import map entry points at."""

    JS = "js"
    CSS = "css"

    @classmethod
    def from_filename(cls, filename: str) -> "ImportMapType":
        """Guess the type from a file name or URL extension (JS by default)."""
        suffix = PurePosixPath(filename.split("?", 1)[0]).suffix.lower()
        return cls.CSS if suffix == ".css" else cls.JS


@dataclass
class ImportMapEntry:
    """A single declared import map entry.

    Attributes:
        import_name: Module specifier used by ``import`` statements; unique
            within an :class:`ImportMapEntries` collection.
        path: Local path of the module: a logical asset path, a path
            relative to the project root (``./assets/app.js``) or an absolute
            filesystem path.
        url: Remote (CDN) URL of the module.
        type: Whether the module is JavaScript or CSS.
        is_entrypoint: Whether pages may load the module directly.
        is_downloaded: Whether the remote content was vendored to ``path``.
    """

    import_name: str
    path: Optional[str] = None
    url: Optional[str] = None
    type: ImportMapType = ImportMapType.JS
    is_entrypoint: bool = False
    is_downloaded: bool = False

    def __post_init__(self) -> None:
        if not self.path and not self.url:
            raise ValueError(
                f'Import map entry "{self.import_name}" needs a path or a url'
            )
        if self.is_downloaded and not (self.path and self.url):
            raise ValueError(
                f'Downloaded entry "{self.import_name}" needs both a path and a url'
            )

    @property
    def is_remote_package(self) -> bool:
        """Served straight from its URL (not vendored)."""
        return self.url is not None and not self.is_downloaded

    @property
    def is_local(self) -> bool:
        """A project file with no remote origin."""
        return self.url is None

    @property
    def has_url(self) -> bool:
        return self.url is not None

    def to_config(self) -> Dict[str, Any]:
        """Return the persisted dictionary form of this entry."""
        data: Dict[str, Any] = {}
        if self.url is not None:
            data["url"] = self.url
        if self.path is not None:
            data["downloaded_to" if self.is_downloaded else "path"] = self.path
        if self.type is not ImportMapType.JS:
            data["type"] = self.type.value
        if self.is_entrypoint:
            data["entrypoint"] = True
        return data

    @classmethod
    def from_config(cls, import_name: str, data: Mapping[str, Any]) -> "ImportMapEntry":
        """Build an entry from its persisted dictionary form.

        Raises:
            ValueError: Unknown keys, an invalid type, a non-boolean
                ``entrypoint`` or no path/url.
        """
        unknown = set(data) - {"path", "url", "downloaded_to", "type", "entrypoint"}
        if unknown:
            raise ValueError(
                f'Unknown keys for "{import_name}": {", ".join(sorted(unknown))}'
            )
        if "path" in data and "downloaded_to" in data:
            raise ValueError(
                f'Entry "{import_name}" cannot have both "path" and "downloaded_to"'
            )

        entrypoint = data.get("entrypoint", False)
        if not isinstance(entrypoint, bool):
            raise ValueError(
                f'"entrypoint" of "{import_name}" must be true or false, got {entrypoint!r}'
            )

        downloaded_to = data.get("downloaded_to")
        return cls(
            import_name=import_name,
            path=downloaded_to if downloaded_to is not None else data.get("path"),
            url=data.get("url"),
            type=ImportMapType(data.get("type", ImportMapType.JS.value)),
            is_entrypoint=entrypoint,
            is_downloaded=downloaded_to is not None,
        )


class ImportMapEntries:
    """Ordered collection of :class:`ImportMapEntry` keyed by import name.

    Example:
        >>> entries = ImportMapEntries([ImportMapEntry("app", path="app.js")])
        >>> "app" in entries
        True
        >>> entries.get("app").path
        'app.js'
    """

    def __init__(self, entries: Iterable[ImportMapEntry] = ()) -> None:
        self._entries: Dict[str, ImportMapEntry] = {}
        for entry in entries:
            self.add(entry)

    def add(self, entry: ImportMapEntry) -> None:
        """Append ``entry``, or replace the same-named entry in place."""
        self._entries[entry.import_name] = entry

    def has(self, import_name: str) -> bool:
        return import_name in self._entries

    def get(self, import_name: str) -> ImportMapEntry:
        """Return the entry named ``import_name``.

        Raises:
            UnknownEntryError: No such entry.
        """
        try:
            return self._entries[import_name]
        except KeyError:
            raise UnknownEntryError(
                f'The import map entry "{import_name}" does not exist',
                import_name=import_name,
            ) from None

    def remove(self, import_name: str) -> None:
        if import_name not in self._entries:
            raise UnknownEntryError(
                f'The import map entry "{import_name}" does not exist',
                import_name=import_name,
            )
        del self._entries[import_name]

    def names(self) -> List[str]:
        return list(self._entries)

    def with_changes(
        self,
        *,
        added: Iterable[ImportMapEntry] = (),
        removed: Iterable[str] = (),
    ) -> "ImportMapEntries":
        """Return a new collection with entries removed, then added.

        Added entries whose name already exists keep that entry's position;
        new names are appended in the order given.
        """
        removed_names = set(removed)
        result = ImportMapEntries(
            entry for entry in self if entry.import_name not in removed_names
        )
        for entry in added:
            result.add(entry)
        return result

    def __contains__(self, import_name: object) -> bool:
        return import_name in self._entries

    def __iter__(self) -> Iterator[ImportMapEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImportMapEntries):
            return NotImplemented
        return list(self._entries.items()) == list(other._entries.items())

    def __repr__(self) -> str:
        return f"ImportMapEntries({list(self._entries)!r})"
