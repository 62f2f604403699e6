from __future__ import annotations

from typing import Optional

import pytest

from importmapper.core.specifier import PackageUrl, parse_package_name, parse_package_url
from importmapper.exceptions import InvalidSpecifierError
from importmapper.models import PackageSpecifier


@pytest.mark.unit
class TestParsePackageName:
    """Tests for parse_package_name."""

    @pytest.mark.parametrize(
        "spec,expected",
        [
            ("lodash", PackageSpecifier("lodash")),
            ("lodash@^4.17", PackageSpecifier("lodash", version="^4.17")),
            ("@hotwired/stimulus", PackageSpecifier("@hotwired/stimulus")),
            ("@hotwired/stimulus@3.2.1", PackageSpecifier("@hotwired/stimulus", version="3.2.1")),
            ("npm:lodash", PackageSpecifier("lodash", registry="npm")),
            ("lodash=lo", PackageSpecifier("lodash", alias="lo")),
            (
                "npm:@scope/name@^1.2.3=alias",
                PackageSpecifier("@scope/name", registry="npm", version="^1.2.3", alias="alias"),
            ),
            (
                "bootstrap/dist/css/bootstrap.min.css",
                PackageSpecifier("bootstrap/dist/css/bootstrap.min.css"),
            ),
            (
                "@popperjs/core/dist/umd/popper.js@2.11",
                PackageSpecifier("@popperjs/core/dist/umd/popper.js", version="2.11"),
            ),
            ("lodash@4 5", None),
        ],
        ids=[
            "name",
            "version",
            "scoped",
            "scoped-version",
            "registry",
            "alias",
            "everything",
            "subpath",
            "scoped-subpath-version",
            "space-in-version",
        ],
    )
    def test_parse(self, spec: str, expected: Optional[PackageSpecifier]) -> None:
        if expected is None:
            with pytest.raises(InvalidSpecifierError):
                parse_package_name(spec)
        else:
            assert parse_package_name(spec) == expected

    def test_empty_version_is_none(self) -> None:
        assert parse_package_name("lodash@").version is None

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert parse_package_name("  lodash  ").package == "lodash"

    @pytest.mark.parametrize(
        "spec",
        ["", "   ", ":lodash", "lodash=", "@", "@/name", "lo dash", "npm:"],
    )
    def test_invalid(self, spec: str) -> None:
        with pytest.raises(InvalidSpecifierError) as exc_info:
            parse_package_name(spec)

        assert exc_info.value.specifier == spec


@pytest.mark.unit
class TestParsePackageUrl:
    """Tests for parse_package_url."""

    def test_jspm_url(self) -> None:
        parsed = parse_package_url("https://ga.jspm.io/npm:lodash@4.17.21/lodash.js")

        assert parsed == PackageUrl(
            registry="npm",
            package="lodash",
            version="4.17.21",
            subpath="/lodash.js",
            host="ga.jspm.io",
        )

    def test_jspm_scoped_url(self) -> None:
        parsed = parse_package_url(
            "https://ga.jspm.io/npm:@hotwired/stimulus@3.2.1/dist/stimulus.js"
        )

        assert parsed is not None
        assert parsed.package == "@hotwired/stimulus"
        assert parsed.version == "3.2.1"
        assert parsed.subpath == "/dist/stimulus.js"

    def test_jsdelivr_esm_url(self) -> None:
        parsed = parse_package_url("https://cdn.jsdelivr.net/npm/lodash@4.17.21/+esm")

        assert parsed == PackageUrl(
            registry="npm",
            package="lodash",
            version="4.17.21",
            subpath=None,
            host="cdn.jsdelivr.net",
        )

    def test_jsdelivr_subpath_url(self) -> None:
        parsed = parse_package_url(
            "https://cdn.jsdelivr.net/npm/bootstrap@5.3.2/dist/css/bootstrap.min.css"
        )

        assert parsed is not None
        assert parsed.package == "bootstrap"
        assert parsed.subpath == "/dist/css/bootstrap.min.css"

    def test_prerelease_version(self) -> None:
        parsed = parse_package_url("https://cdn.jsdelivr.net/npm/vue@3.4.0-beta.1/+esm")

        assert parsed is not None
        assert parsed.version == "3.4.0-beta.1"

    @pytest.mark.parametrize(
        "url",
        [
            "https://unpkg.com/lodash@4.17.21/lodash.js",
            "ftp://cdn.jsdelivr.net/npm/lodash@4.17.21",
            "https://cdn.jsdelivr.net/",
            "https://ga.jspm.io/lodash@4.17.21/lodash.js",
            "not a url",
        ],
    )
    def test_unknown_urls(self, url: str) -> None:
        assert parse_package_url(url) is None
