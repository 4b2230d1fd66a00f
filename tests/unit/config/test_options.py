"""Tests for rebuild options parsing."""

import json

import pytest

from electron_native.config import ConfigOptions, ModuleDescriptor, OptionsError


class TestConfigOptions:
    """Test ConfigOptions construction and validation."""

    def test_defaults(self):
        """Test default option values."""
        options = ConfigOptions.from_dict({})

        assert options.force_rebuild is False
        assert options.output_path == "./"
        assert options.python_path is None
        assert options.debug_build is False
        assert options.parallel_build is False
        assert options.user_modules == []
        assert options.optional_dependencies is False
        assert options.rebuild_command == ["electron-rebuild"]

    def test_all_options(self):
        """Test parsing every recognized option."""
        options = ConfigOptions.from_dict({
            "forceRebuild": True,
            "outputPath": "./native",
            "pythonPath": "/usr/bin/python3",
            "debugBuild": True,
            "parallelBuild": True,
            "optionalDependencies": True,
            "rebuildCommand": ["npx", "electron-rebuild"],
            "userModules": ["addons/a"],
        })

        assert options.force_rebuild is True
        assert options.output_path == "./native"
        assert options.python_path == "/usr/bin/python3"
        assert options.debug_build is True
        assert options.parallel_build is True
        assert options.optional_dependencies is True
        assert options.rebuild_command == ["npx", "electron-rebuild"]
        assert options.user_modules == [ModuleDescriptor("addons/a", "./native", None)]

    def test_user_module_string_uses_global_output_path(self):
        """Test a bare source string inherits outputPath."""
        options = ConfigOptions.from_dict({"outputPath": "lib", "userModules": ["src/addon"]})

        assert options.user_modules[0].output_path == "lib"
        assert options.user_modules[0].debug_build is None

    def test_user_module_object_overrides(self):
        """Test a module object with its own outputPath and debugBuild."""
        options = ConfigOptions.from_dict({
            "userModules": [{"source": "src/addon", "outputPath": "addon", "debugBuild": False}]
        })

        module = options.user_modules[0]
        assert module.source == "src/addon"
        assert module.output_path == "addon"
        assert module.debug_build is False

    def test_user_module_object_without_output_path(self):
        """Test a module object falls back to the default output path."""
        options = ConfigOptions.from_dict({"userModules": [{"source": "src/addon"}]})
        assert options.user_modules[0].output_path == "./"

    def test_rebuild_command_string(self):
        """Test a single-string rebuild command."""
        options = ConfigOptions.from_dict({"rebuildCommand": "my-rebuild"})
        assert options.rebuild_command == ["my-rebuild"]

    @pytest.mark.parametrize("data", [
        {"forceRebuild": "yes"},
        {"outputPath": 5},
        {"pythonPath": ["python"]},
        {"userModules": "src/addon"},
        {"userModules": [42]},
        {"userModules": [{"outputPath": "x"}]},
        {"userModules": [{"source": "a", "debugBuild": "true"}]},
        {"userModules": [{"source": "a", "extra": 1}]},
        {"rebuildCommand": []},
        {"outputPath": "../outside"},
        {"outputPath": "native/../../outside"},
        {"userModules": [{"source": "a", "outputPath": "../.."}]},
        {"unknownOption": True},
    ])
    def test_invalid_options(self, data):
        """Test invalid option values are rejected."""
        with pytest.raises(OptionsError):
            ConfigOptions.from_dict(data)

    def test_not_a_mapping(self):
        """Test a non-object config is rejected."""
        with pytest.raises(OptionsError, match="JSON object"):
            ConfigOptions.from_dict(["forceRebuild"])

    def test_from_file(self, tmp_path):
        """Test loading options from a JSON file."""
        config = tmp_path / "electron-native.json"
        config.write_text(json.dumps({"parallelBuild": True}))

        options = ConfigOptions.from_file(config)
        assert options.parallel_build is True

    def test_from_missing_file(self, tmp_path):
        """Test a missing config file raises OptionsError."""
        with pytest.raises(OptionsError, match="not found"):
            ConfigOptions.from_file(tmp_path / "missing.json")

    def test_from_malformed_file(self, tmp_path):
        """Test a malformed config file raises OptionsError."""
        config = tmp_path / "electron-native.json"
        config.write_text("{not json")

        with pytest.raises(OptionsError, match="Failed to parse"):
            ConfigOptions.from_file(config)

    def test_inner_parent_reference_allowed(self):
        """Test ".." that stays inside the output root is accepted."""
        options = ConfigOptions.from_dict({"outputPath": "native/../lib"})

        assert options.output_path == "native/../lib"


class TestModuleDescriptor:
    """Test debug build resolution."""

    def test_inherits_global_debug_build(self):
        descriptor = ModuleDescriptor(source="a")
        assert descriptor.effective_debug_build(ConfigOptions(debug_build=True)) is True
        assert descriptor.effective_debug_build(ConfigOptions(debug_build=False)) is False

    def test_override_wins(self):
        descriptor = ModuleDescriptor(source="a", debug_build=False)
        assert descriptor.effective_debug_build(ConfigOptions(debug_build=True)) is False
