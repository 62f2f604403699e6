from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from importmapper.config import (
    ImportMapperConfig,
    _parse_section,
    _pyproject_has_importmapper_section,
    _read_toml,
    discover_config_file,
    load_config,
)
from importmapper.exceptions import ConfigError


@pytest.mark.unit
class TestImportMapperConfig:
    """Tests for the ImportMapperConfig dataclass."""

    def test_defaults(self) -> None:
        config = ImportMapperConfig(base_dir=Path("/project"))

        assert config.entries_path == Path("/project/importmap.json")
        assert config.asset_paths == [Path("/project/assets")]
        assert config.public_prefix == "/assets/"
        assert config.public_path == Path("/project/public/assets")
        assert config.vendor_path == Path("/project/assets/vendor")
        assert config.timeout == 30
        assert config.source_path is None

    def test_default_base_dir_is_cwd(self, tmp_path: Path) -> None:
        with patch("importmapper.config.Path.cwd", return_value=tmp_path):
            config = ImportMapperConfig()

        assert config.base_dir == tmp_path

    def test_to_log_dict_omits_metadata(self) -> None:
        config = ImportMapperConfig(
            asset_dirs=["assets", "lib"],
            timeout=5,
            source_path=Path("/project/importmapper.toml"),
        )

        result = config.to_log_dict()

        assert result["asset_dirs"] == ["assets", "lib"]
        assert result["timeout"] == 5
        assert "source_path" not in result
        assert "base_dir" not in result


@pytest.mark.unit
class TestDiscoverConfigFile:
    """Tests for discover_config_file."""

    def test_explicit_path_wins(self, tmp_path: Path) -> None:
        explicit = tmp_path / "custom.toml"
        explicit.write_text("[importmapper]\n", encoding="utf-8")
        (tmp_path / "importmapper.toml").write_text("[importmapper]\n", encoding="utf-8")

        with patch("importmapper.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file(explicit) == explicit.resolve()

    def test_missing_explicit_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            discover_config_file(tmp_path / "missing.toml")

    def test_importmapper_toml_before_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "importmapper.toml").write_text("[importmapper]\n", encoding="utf-8")
        (tmp_path / "pyproject.toml").write_text("[tool.importmapper]\n", encoding="utf-8")

        with patch("importmapper.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == tmp_path / "importmapper.toml"

    def test_pyproject_with_section(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            "[tool.importmapper]\ntimeout = 5\n", encoding="utf-8"
        )

        with patch("importmapper.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == tmp_path / "pyproject.toml"

    def test_pyproject_without_section_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.black]\n", encoding="utf-8")

        with patch("importmapper.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() is None


@pytest.mark.unit
class TestPyprojectSection:
    """Tests for _pyproject_has_importmapper_section."""

    def test_section_present(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool.importmapper]\n", encoding="utf-8")

        assert _pyproject_has_importmapper_section(path) is True

    def test_broken_file_counts_as_missing(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool.importmapper\n", encoding="utf-8")

        assert _pyproject_has_importmapper_section(path) is False


@pytest.mark.unit
class TestReadToml:
    """Tests for _read_toml."""

    def test_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "importmapper.toml"
        path.write_text('[importmapper]\nvendor_dir = "lib"\n', encoding="utf-8")

        assert _read_toml(path) == {"importmapper": {"vendor_dir": "lib"}}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "importmapper.toml"
        path.write_text("not = = toml", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            _read_toml(path)

    def test_unreadable_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            _read_toml(tmp_path / "missing.toml")


@pytest.mark.unit
class TestParseSection:
    """Tests for _parse_section validation."""

    def test_empty_section(self) -> None:
        config = _parse_section({}, config_path="importmapper.toml")

        assert config.to_log_dict() == ImportMapperConfig().to_log_dict()

    def test_all_options(self) -> None:
        config = _parse_section(
            {
                "entries_file": "config/importmap.json",
                "asset_dirs": ["assets", "node_assets"],
                "public_prefix": "/static/",
                "public_dir": "public/static",
                "vendor_dir": "assets/lib",
                "timeout": 10,
            },
            config_path="importmapper.toml",
        )

        assert config.entries_file == "config/importmap.json"
        assert config.asset_dirs == ["assets", "node_assets"]
        assert config.public_prefix == "/static/"
        assert config.public_dir == "public/static"
        assert config.vendor_dir == "assets/lib"
        assert config.timeout == 10

    @pytest.mark.parametrize(
        "section,option",
        [
            ({"vendor_dir": ""}, "vendor_dir"),
            ({"public_prefix": 3}, "public_prefix"),
            ({"asset_dirs": "assets"}, "asset_dirs"),
            ({"asset_dirs": []}, "asset_dirs"),
            ({"asset_dirs": ["assets", ""]}, "asset_dirs"),
            ({"timeout": 0}, "timeout"),
            ({"timeout": True}, "timeout"),
            ({"timeout": "10"}, "timeout"),
        ],
    )
    def test_invalid_values(self, section, option: str) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section(section, config_path="importmapper.toml")

        assert exc_info.value.option == option

    def test_unknown_keys(self) -> None:
        with pytest.raises(ConfigError, match="Unknown configuration keys: cdn"):
            _parse_section({"cdn": "unpkg"}, config_path="importmapper.toml")


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        with patch("importmapper.config.Path.cwd", return_value=tmp_path):
            config = load_config()

        assert config.source_path is None
        assert config.base_dir == tmp_path

    def test_importmapper_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "importmapper.toml"
        path.write_text('[importmapper]\nasset_dirs = ["web"]\n', encoding="utf-8")

        with patch("importmapper.config.Path.cwd", return_value=tmp_path):
            config = load_config()

        assert config.asset_dirs == ["web"]
        assert config.source_path == path

    def test_pyproject_toml(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[tool.importmapper]\npublic_prefix = "/static/"\n', encoding="utf-8"
        )

        with patch("importmapper.config.Path.cwd", return_value=tmp_path):
            config = load_config()

        assert config.public_prefix == "/static/"

    def test_paths_are_relative_to_config_file(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        project.mkdir()
        path = project / "settings.toml"
        path.write_text('[importmapper]\nvendor_dir = "web/vendor"\n', encoding="utf-8")

        config = load_config(path)

        assert config.base_dir == project.resolve()
        assert config.vendor_path == project.resolve() / "web" / "vendor"
        assert config.entries_path == project.resolve() / "importmap.json"

    def test_invalid_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "importmapper.toml"
        path.write_text("[importmapper]\ntimeout = -1\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="timeout"):
            load_config(path)
