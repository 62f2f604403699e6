from __future__ import annotations

from pathlib import Path

import click
import pytest

from importmapper.config import ImportMapperConfig
from importmapper.context import ImportMapperContext, pass_context
from importmapper.core import (
    DirectoryAssetLookup,
    ImportMapManager,
    JsDelivrEsmResolver,
    JsonEntryStore,
)


@pytest.mark.unit
class TestImportMapperContext:
    """Tests for ImportMapperContext."""

    def test_defaults(self) -> None:
        ctx = ImportMapperContext()

        assert ctx.config_path is None
        assert ctx.verbose == 0
        assert ctx.color is True
        assert ctx.config is None

    def test_slots_prevent_arbitrary_attributes(self) -> None:
        ctx = ImportMapperContext()

        with pytest.raises(AttributeError):
            ctx.arbitrary_attribute = "value"  # type: ignore

    def test_manager_is_wired_from_config(self, tmp_path: Path) -> None:
        ctx = ImportMapperContext()
        ctx.config = ImportMapperConfig(
            entries_file="config/importmap.json",
            asset_dirs=["web"],
            public_prefix="/static/",
            timeout=7,
            base_dir=tmp_path,
        )

        manager = ctx.manager

        assert isinstance(manager, ImportMapManager)
        assert isinstance(manager.entry_store, JsonEntryStore)
        assert manager.entry_store.path == tmp_path / "config" / "importmap.json"
        assert isinstance(manager.asset_lookup, DirectoryAssetLookup)
        assert manager.asset_lookup.asset_dirs == [tmp_path / "web"]
        assert manager.asset_lookup.public_prefix == "/static/"
        assert manager.lifecycle.vendor_dir == tmp_path / "assets" / "vendor"
        assert isinstance(manager.lifecycle.resolver, JsDelivrEsmResolver)
        assert manager.lifecycle.resolver.timeout == 7
        assert manager.public_path_probe.public_filesystem_path() == tmp_path / "public" / "assets"

    def test_manager_is_built_once(self, tmp_path: Path) -> None:
        ctx = ImportMapperContext()
        ctx.config = ImportMapperConfig(base_dir=tmp_path)

        assert ctx.manager is ctx.manager


@pytest.mark.unit
class TestPassContext:
    """Tests for the pass_context decorator."""

    def test_injects_existing_context(self) -> None:
        @click.command()
        @pass_context
        def command(ctx: ImportMapperContext) -> ImportMapperContext:
            return ctx

        click_ctx = click.Context(click.Command("test"))
        importmapper_ctx = ImportMapperContext()
        click_ctx.obj = importmapper_ctx

        assert click_ctx.invoke(command) is importmapper_ctx

    def test_creates_context_when_missing(self) -> None:
        @click.command()
        @pass_context
        def command(ctx: ImportMapperContext) -> ImportMapperContext:
            return ctx

        result = click.Context(click.Command("test")).invoke(command)

        assert isinstance(result, ImportMapperContext)
        assert result.config is None
