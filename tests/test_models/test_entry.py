from __future__ import annotations

import pytest

from importmapper.exceptions import UnknownEntryError
from importmapper.models import ImportMapEntries, ImportMapEntry, ImportMapType


@pytest.mark.unit
class TestImportMapType:
    """Tests for ImportMapType.from_filename."""

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("app.js", ImportMapType.JS),
            ("styles/app.css", ImportMapType.CSS),
            ("STYLES.CSS", ImportMapType.CSS),
            ("https://cdn.jsdelivr.net/npm/bootstrap@5.3.2/dist/css/bootstrap.min.css", ImportMapType.CSS),
            ("https://cdn.jsdelivr.net/npm/lodash@4.17.21/+esm", ImportMapType.JS),
            ("https://cdn.example/app.css?v=2", ImportMapType.CSS),
            ("no-extension", ImportMapType.JS),
        ],
    )
    def test_from_filename(self, filename: str, expected: ImportMapType) -> None:
        assert ImportMapType.from_filename(filename) is expected


@pytest.mark.unit
class TestImportMapEntry:
    """Tests for ImportMapEntry."""

    def test_defaults(self) -> None:
        entry = ImportMapEntry("app", path="app.js")

        assert entry.type is ImportMapType.JS
        assert not entry.is_entrypoint
        assert not entry.is_downloaded
        assert entry.is_local
        assert not entry.is_remote_package
        assert not entry.has_url

    def test_remote_package(self) -> None:
        entry = ImportMapEntry("lodash", url="https://cdn.example/lodash.js")

        assert entry.is_remote_package
        assert entry.has_url
        assert not entry.is_local

    def test_downloaded_package(self) -> None:
        entry = ImportMapEntry(
            "lodash",
            path="vendor/lodash.js",
            url="https://cdn.example/lodash.js",
            is_downloaded=True,
        )

        assert not entry.is_remote_package
        assert not entry.is_local
        assert entry.has_url

    def test_requires_path_or_url(self) -> None:
        with pytest.raises(ValueError, match="needs a path or a url"):
            ImportMapEntry("app")

    @pytest.mark.parametrize(
        "kwargs",
        [{"path": "vendor/lodash.js"}, {"url": "https://cdn.example/lodash.js"}],
        ids=["no-url", "no-path"],
    )
    def test_downloaded_requires_both(self, kwargs) -> None:
        with pytest.raises(ValueError, match="needs both"):
            ImportMapEntry("lodash", is_downloaded=True, **kwargs)

    def test_to_config(self) -> None:
        assert ImportMapEntry("app", path="app.js").to_config() == {"path": "app.js"}
        assert ImportMapEntry(
            "bootstrap.css",
            url="https://cdn.example/bootstrap.css",
            type=ImportMapType.CSS,
            is_entrypoint=True,
        ).to_config() == {
            "url": "https://cdn.example/bootstrap.css",
            "type": "css",
            "entrypoint": True,
        }
        assert ImportMapEntry(
            "lodash",
            path="vendor/lodash.js",
            url="https://cdn.example/lodash.js",
            is_downloaded=True,
        ).to_config() == {
            "url": "https://cdn.example/lodash.js",
            "downloaded_to": "vendor/lodash.js",
        }

    def test_from_config(self) -> None:
        entry = ImportMapEntry.from_config(
            "lodash",
            {"url": "https://cdn.example/lodash.js", "downloaded_to": "vendor/lodash.js"},
        )

        assert entry == ImportMapEntry(
            "lodash",
            path="vendor/lodash.js",
            url="https://cdn.example/lodash.js",
            is_downloaded=True,
        )

    @pytest.mark.parametrize("value", ["false", 1, None])
    def test_from_config_rejects_non_boolean_entrypoint(self, value) -> None:
        with pytest.raises(ValueError, match="must be true or false"):
            ImportMapEntry.from_config("app", {"path": "app.js", "entrypoint": value})

    def test_from_config_rejects_path_and_downloaded_to(self) -> None:
        with pytest.raises(ValueError, match="cannot have both"):
            ImportMapEntry.from_config(
                "lodash",
                {
                    "path": "lodash.js",
                    "downloaded_to": "vendor/lodash.js",
                    "url": "https://cdn.example/lodash.js",
                },
            )


@pytest.mark.unit
class TestImportMapEntries:
    """Tests for the ordered ImportMapEntries collection."""

    @pytest.fixture
    def entries(self) -> ImportMapEntries:
        return ImportMapEntries(
            [
                ImportMapEntry("app", path="app.js"),
                ImportMapEntry("lodash", url="https://cdn.example/lodash.js"),
                ImportMapEntry("admin", path="admin.js"),
            ]
        )

    def test_lookup(self, entries: ImportMapEntries) -> None:
        assert "app" in entries
        assert entries.has("lodash")
        assert not entries.has("cowsay")
        assert entries.get("admin").path == "admin.js"
        assert len(entries) == 3

    def test_get_unknown_raises(self, entries: ImportMapEntries) -> None:
        with pytest.raises(UnknownEntryError) as exc_info:
            entries.get("cowsay")

        assert exc_info.value.import_name == "cowsay"

    def test_add_replaces_in_place(self, entries: ImportMapEntries) -> None:
        entries.add(ImportMapEntry("lodash", url="https://cdn.example/lodash-v2.js"))

        assert entries.names() == ["app", "lodash", "admin"]
        assert entries.get("lodash").url.endswith("lodash-v2.js")

    def test_remove(self, entries: ImportMapEntries) -> None:
        entries.remove("lodash")

        assert entries.names() == ["app", "admin"]
        with pytest.raises(UnknownEntryError):
            entries.remove("lodash")

    def test_with_changes_returns_new_collection(self, entries: ImportMapEntries) -> None:
        changed = entries.with_changes(
            added=[
                ImportMapEntry("cowsay", url="https://cdn.example/cowsay.js"),
                ImportMapEntry("app", path="new-app.js"),
            ],
            removed=["lodash"],
        )

        assert changed.names() == ["app", "admin", "cowsay"]
        assert changed.get("app").path == "new-app.js"
        assert entries.names() == ["app", "lodash", "admin"]
        assert entries.get("app").path == "app.js"

    def test_iteration_is_a_snapshot(self, entries: ImportMapEntries) -> None:
        for entry in entries:
            entries.remove(entry.import_name)

        assert len(entries) == 0

    def test_equality(self, entries: ImportMapEntries) -> None:
        assert entries == ImportMapEntries(list(entries))
        assert entries != ImportMapEntries(reversed(list(entries)))
