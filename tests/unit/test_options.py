#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_options.py
"""Unit tests for option dataclasses."""

from pathlib import Path

import pytest

from doc2conf.options.conversion import ConversionOptions
from doc2conf.options.storage import StorageRendererOptions


@pytest.mark.unit
class TestConversionOptions:
    """Tests for ConversionOptions."""

    def test_defaults(self) -> None:
        """Test default values."""
        options = ConversionOptions()

        assert options.parse_emoji is True
        assert options.parse_mentions is False
        assert options.instance_type == "cloud"
        assert options.local_ids == "random"
        assert options.macro_format is None

    @pytest.mark.parametrize(
        "kwargs",
        [{"macro_format": "wiki"}, {"instance_type": "desktop"}, {"local_ids": "sequential"}],
    )
    def test_literal_fields_validated(self, kwargs) -> None:
        """Test that unsupported literal values are rejected."""
        with pytest.raises(ValueError):
            ConversionOptions(**kwargs)

    def test_create_updated_returns_copy(self) -> None:
        """Test that updating leaves the original untouched."""
        options = ConversionOptions()
        updated = options.create_updated(space_key="DOCS")

        assert updated.space_key == "DOCS"
        assert options.space_key is None

    def test_from_mapping_ignores_unknown_keys(self) -> None:
        """Test building from a config mapping."""
        options = ConversionOptions.from_mapping({"generate_toc": True, "log_level": "DEBUG"})
        assert options.generate_toc is True

    def test_resolve_path(self, tmp_path: Path) -> None:
        """Test relative and absolute path resolution."""
        options = ConversionOptions(base_path=str(tmp_path))

        assert options.resolve_path("img/a.png") == (tmp_path / "img" / "a.png").resolve()
        assert options.resolve_path(str(tmp_path / "b.csv")) == tmp_path / "b.csv"


@pytest.mark.unit
class TestStorageRendererOptions:
    """Tests for StorageRendererOptions."""

    def test_diagram_languages_normalized(self) -> None:
        """Test that languages are lower-cased and stored as a tuple."""
        options = StorageRendererOptions(diagram_languages=["Mermaid", "PlantUML"])
        assert options.diagram_languages == ("mermaid", "plantuml")

    def test_macro_providers_frozen(self) -> None:
        """Test that providers are stored as a frozenset."""
        options = StorageRendererOptions(macro_providers=["com.example"])
        assert options.macro_providers == frozenset({"com.example"})
