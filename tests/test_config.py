# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Tests for configuration loading and validation."""

import tempfile
from pathlib import Path

import yaml

from vc_api_coverage.config import RESERVED_INPUT_NAMES, Config


def test_default_config_when_file_missing():
    """Test that defaults are used when config file is missing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "nonexistent.yml"
        config = Config(config_path=config_path)

        assert config.component_define_callees == ["defineComponent"]
        assert config.mount_callees == ["mount", "shallowMount", "render"]
        assert config.module_extensions == [".ts", ".tsx", ".js", ".jsx", ".vue"]
        assert config.reserved_input_names == RESERVED_INPUT_NAMES
        assert config.max_file_size_bytes == 10 * 1024 * 1024
        assert config.max_resolution_depth == 32


def test_valid_config_loading():
    """Test loading a valid configuration file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "config.yml"
        config_data = {
            "component_define_callees": ["defineComponent", "defineNuxtComponent"],
            "mount_callees": ["mountSuspended"],
            "max_resolution_depth": 8,
        }

        with open(config_path, "w") as f:
            yaml.dump(config_data, f)

        config = Config(config_path=config_path)

        assert config.component_define_callees == ["defineComponent", "defineNuxtComponent"]
        assert config.mount_callees == ["mountSuspended"]
        assert config.max_resolution_depth == 8
        # Defaults for unspecified values
        assert config.module_extensions == [".ts", ".tsx", ".js", ".jsx", ".vue"]


def test_invalid_parameter_values():
    """Test that invalid parameter values are rejected and defaults used."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "config.yml"
        config_data = {
            "max_file_size_bytes": 0,  # Invalid: must be > 0
            "max_resolution_depth": -1,  # Invalid: must be > 0
            "module_extensions": ["ts"],  # Invalid: missing leading dot
            "mount_callees": [],  # Invalid: must not be empty
        }

        with open(config_path, "w") as f:
            yaml.dump(config_data, f)

        config = Config(config_path=config_path)

        assert config.max_file_size_bytes == 10 * 1024 * 1024
        assert config.max_resolution_depth == 32
        assert config.module_extensions == [".ts", ".tsx", ".js", ".jsx", ".vue"]
        assert config.mount_callees == ["mount", "shallowMount", "render"]


def test_invalid_type_values():
    """Test that wrong types are rejected, including booleans for integers."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "config.yml"
        config_data = {
            "max_resolution_depth": True,
            "max_file_size_bytes": "large",
            "component_define_callees": "defineComponent",
            "reserved_input_names": ["key", 3],
        }

        with open(config_path, "w") as f:
            yaml.dump(config_data, f)

        config = Config(config_path=config_path)

        assert config.max_resolution_depth == 32
        assert config.max_file_size_bytes == 10 * 1024 * 1024
        assert config.component_define_callees == ["defineComponent"]
        assert config.reserved_input_names == RESERVED_INPUT_NAMES


def test_unknown_parameters_ignored():
    """Test that unknown configuration keys are ignored."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "config.yml"
        config_data = {"unknown_key": 1, "max_resolution_depth": 4}

        with open(config_path, "w") as f:
            yaml.dump(config_data, f)

        config = Config(config_path=config_path)

        assert config.max_resolution_depth == 4
        assert not hasattr(config, "unknown_key")


def test_empty_config_file():
    """Test that an empty file falls back to defaults."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "config.yml"
        config_path.write_text("")

        config = Config(config_path=config_path)

        assert config.max_resolution_depth == 32


def test_malformed_yaml():
    """Test that malformed YAML falls back to defaults."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "config.yml"
        config_path.write_text("mount_callees: [mount\n  bad: : yaml")

        config = Config(config_path=config_path)

        assert config.mount_callees == ["mount", "shallowMount", "render"]


def test_non_dict_yaml():
    """Test that a YAML list instead of a mapping falls back to defaults."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "config.yml"
        config_path.write_text("- mount\n- render\n")

        config = Config(config_path=config_path)

        assert config.mount_callees == ["mount", "shallowMount", "render"]


def test_defaults_not_shared_between_instances():
    """Test that mutating one config's lists does not leak into another."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "nonexistent.yml"
        first = Config(config_path=config_path)
        first.mount_callees.append("customMount")

        second = Config(config_path=config_path)

        assert "customMount" not in second.mount_callees
        assert "customMount" not in Config.DEFAULTS["mount_callees"]
