from __future__ import annotations

import pytest

from importmapper.models import (
    ImportMapEntry,
    PackageRequireOptions,
    PackageSpecifier,
    PackageUpdate,
    ResolvedPackage,
)


@pytest.mark.unit
class TestPackageRequireOptions:
    """Tests for PackageRequireOptions."""

    def test_effective_import_name_defaults_to_package(self) -> None:
        assert PackageRequireOptions("lodash").effective_import_name == "lodash"

    def test_effective_import_name_uses_alias(self) -> None:
        options = PackageRequireOptions("lodash-es", import_name="lodash")

        assert options.effective_import_name == "lodash"

    def test_from_specifier(self) -> None:
        specifier = PackageSpecifier(
            "@hotwired/stimulus", registry="npm", version="^3.2", alias="stimulus"
        )

        options = PackageRequireOptions.from_specifier(
            specifier, download=True, entrypoint=True
        )

        assert options == PackageRequireOptions(
            package_name="@hotwired/stimulus",
            version_constraint="^3.2",
            download=True,
            import_name="stimulus",
            registry="npm",
            entrypoint=True,
        )

    def test_from_specifier_without_registry(self) -> None:
        options = PackageRequireOptions.from_specifier(
            PackageSpecifier("app"), path="/project/assets/app.js"
        )

        assert options.registry is None
        assert options.path == "/project/assets/app.js"
        assert options.import_name is None


@pytest.mark.unit
def test_resolved_package_import_name() -> None:
    resolved = ResolvedPackage(
        PackageRequireOptions("lodash-es", import_name="lodash"),
        url="https://cdn.jsdelivr.net/npm/lodash-es@4.17.21/+esm",
    )

    assert resolved.import_name == "lodash"
    assert resolved.content is None


@pytest.mark.unit
def test_package_update_import_name() -> None:
    update = PackageUpdate(
        previous=ImportMapEntry("lodash", url="https://cdn.example/lodash@1.js"),
        current=ImportMapEntry("lodash", url="https://cdn.example/lodash@2.js"),
    )

    assert update.import_name == "lodash"
