"""Tests for harness config loader."""

from pathlib import Path

import pytest

from conformance_harness.config_loader import load_harness_config


class TestLoadHarnessConfig:
    """Tests for load_harness_config function."""

    async def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        """Loads and parses a valid harness.yaml file."""
        config_file = tmp_path / "harness.yaml"
        config_file.write_text(
            """
default_timeout: "5s"
long_timeout: "2m"
timeout_multiplier: 2
harness_timeout: "10m"
"""
        )

        config = await load_harness_config(config_file)

        assert config.default_timeout == "5s"
        assert config.long_timeout == "2m"
        assert config.timeout_multiplier == 2.0
        assert config.resolve_timeout("long") == 240.0
        assert config.resolve_harness_timeout() == 1200.0

    async def test_partial_config_keeps_defaults(self, tmp_path: Path) -> None:
        """Keys left out keep their defaults."""
        config_file = tmp_path / "harness.yaml"
        config_file.write_text("timeout_multiplier: 3\n")

        config = await load_harness_config(config_file)

        assert config.default_timeout == "10s"
        assert config.resolve_timeout() == 30.0

    async def test_raises_for_missing_file(self, tmp_path: Path) -> None:
        """Raises FileNotFoundError for a missing file."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            await load_harness_config(tmp_path / "missing.yaml")

    async def test_raises_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ValueError for malformed YAML."""
        config_file = tmp_path / "harness.yaml"
        config_file.write_text("invalid: yaml: content: [")

        with pytest.raises(ValueError, match="Invalid YAML"):
            await load_harness_config(config_file)

    async def test_raises_for_empty_file(self, tmp_path: Path) -> None:
        """Raises ValueError for an empty file."""
        config_file = tmp_path / "harness.yaml"
        config_file.write_text("")

        with pytest.raises(ValueError, match="Empty config file"):
            await load_harness_config(config_file)

    async def test_raises_for_invalid_schema(self, tmp_path: Path) -> None:
        """Raises ValueError for schema validation errors."""
        config_file = tmp_path / "harness.yaml"
        config_file.write_text('default_timeout: "whenever"\n')

        with pytest.raises(ValueError, match="Invalid harness config schema"):
            await load_harness_config(config_file)

    async def test_raises_for_unknown_keys(self, tmp_path: Path) -> None:
        """Raises ValueError when the file contains unknown keys."""
        config_file = tmp_path / "harness.yaml"
        config_file.write_text('timeout: "long"\n')

        with pytest.raises(ValueError, match="Invalid harness config schema"):
            await load_harness_config(config_file)
