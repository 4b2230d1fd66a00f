"""
Rebuild options for electron-native.

This module defines the per-run configuration object and the user module
descriptors it carries. Options come from a JSON config file (camelCase keys,
the same names the options table uses) and/or command-line flags.

Example electron-native.json:
    {
        "forceRebuild": true,
        "outputPath": "./native",
        "userModules": [
            "native/addon",
            {"source": "native/crypto", "outputPath": "./crypto", "debugBuild": true}
        ]
    }
"""

import json
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


class OptionsError(Exception):
    """Exception raised for invalid rebuild options."""

    pass


DEFAULT_OUTPUT_PATH = "./"
DEFAULT_REBUILD_COMMAND = ["electron-rebuild"]


def check_output_path(output_path: str, context: str) -> str:
    """Reject output paths that climb out of the output root.

    Raises:
        OptionsError: If ``..`` components lead outside the output root
    """
    normalized = posixpath.normpath(output_path.replace("\\", "/").lstrip("/") or ".")
    if normalized == ".." or normalized.startswith("../"):
        raise OptionsError(f"{context}: outputPath '{output_path}' leaves the output directory")
    return output_path


@dataclass(frozen=True)
class ModuleDescriptor:
    """A user native module built from source.

    Attributes:
        source: Directory containing the module's binding.gyp
        output_path: Output sub-path for the module's artifact
        debug_build: Debug build override (None inherits the global setting)
    """

    source: str
    output_path: str = DEFAULT_OUTPUT_PATH
    debug_build: Optional[bool] = None

    def effective_debug_build(self, options: "ConfigOptions") -> bool:
        """Resolve the debug override against the global options."""
        if self.debug_build is None:
            return options.debug_build
        return self.debug_build

    @classmethod
    def from_value(cls, value: Any, default_output_path: str) -> "ModuleDescriptor":
        """Create a descriptor from a config entry.

        Args:
            value: Either a source path string or a dict with ``source`` and
                optional ``outputPath`` / ``debugBuild`` keys
            default_output_path: Output path used when the entry has none

        Raises:
            OptionsError: If the entry is malformed
        """
        if isinstance(value, str):
            if not value:
                raise OptionsError("userModules entries must not be empty")
            return cls(source=value, output_path=default_output_path)

        if not isinstance(value, dict):
            raise OptionsError(
                f"userModules entries must be strings or objects, got {type(value).__name__}"
            )

        unknown = set(value) - {"source", "outputPath", "debugBuild"}
        if unknown:
            raise OptionsError(
                f"Unknown userModules keys: {', '.join(sorted(unknown))}"
            )

        source = value.get("source")
        if not isinstance(source, str) or not source:
            raise OptionsError("userModules entry is missing 'source'")

        output_path = value.get("outputPath") or default_output_path
        if not isinstance(output_path, str):
            raise OptionsError(f"userModules '{source}': outputPath must be a string")
        check_output_path(output_path, f"userModules '{source}'")

        debug_build = value.get("debugBuild")
        if debug_build is not None and not isinstance(debug_build, bool):
            raise OptionsError(f"userModules '{source}': debugBuild must be a boolean")

        return cls(source=source, output_path=output_path, debug_build=debug_build)


@dataclass
class ConfigOptions:
    """Options controlling one rebuild run."""

    force_rebuild: bool = False
    output_path: str = DEFAULT_OUTPUT_PATH
    python_path: Optional[str] = None
    debug_build: bool = False
    parallel_build: bool = False
    user_modules: List[ModuleDescriptor] = field(default_factory=list)
    optional_dependencies: bool = False
    rebuild_command: List[str] = field(default_factory=lambda: list(DEFAULT_REBUILD_COMMAND))

    BOOL_KEYS = {
        "forceRebuild": "force_rebuild",
        "debugBuild": "debug_build",
        "parallelBuild": "parallel_build",
        "optionalDependencies": "optional_dependencies",
    }
    KNOWN_KEYS = set(BOOL_KEYS) | {"outputPath", "pythonPath", "userModules", "rebuildCommand"}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigOptions":
        """Build options from a camelCase mapping, validating every field.

        Raises:
            OptionsError: On unknown keys or values of the wrong type
        """
        if not isinstance(data, dict):
            raise OptionsError("Options must be a JSON object")

        unknown = set(data) - cls.KNOWN_KEYS
        if unknown:
            raise OptionsError(f"Unknown options: {', '.join(sorted(unknown))}")

        kwargs: Dict[str, Any] = {}
        for key, attr in cls.BOOL_KEYS.items():
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, bool):
                raise OptionsError(f"Option '{key}' must be a boolean")
            kwargs[attr] = value

        output_path = data.get("outputPath") or DEFAULT_OUTPUT_PATH
        if not isinstance(output_path, str):
            raise OptionsError("Option 'outputPath' must be a string")
        check_output_path(output_path, "Option 'outputPath'")
        kwargs["output_path"] = output_path

        python_path = data.get("pythonPath")
        if python_path is not None and not isinstance(python_path, str):
            raise OptionsError("Option 'pythonPath' must be a string")
        kwargs["python_path"] = python_path or None

        rebuild_command = data.get("rebuildCommand")
        if rebuild_command is not None:
            if isinstance(rebuild_command, str):
                rebuild_command = [rebuild_command]
            if (
                not isinstance(rebuild_command, list)
                or not rebuild_command
                or not all(isinstance(part, str) and part for part in rebuild_command)
            ):
                raise OptionsError("Option 'rebuildCommand' must be a non-empty list of strings")
            kwargs["rebuild_command"] = list(rebuild_command)

        user_modules = data.get("userModules") or []
        if not isinstance(user_modules, list):
            raise OptionsError("Option 'userModules' must be a list")
        kwargs["user_modules"] = [
            ModuleDescriptor.from_value(entry, output_path) for entry in user_modules
        ]

        return cls(**kwargs)

    @classmethod
    def from_file(cls, config_path: Path) -> "ConfigOptions":
        """Load options from a JSON config file.

        Raises:
            OptionsError: If the file is missing, unreadable or invalid
        """
        if not config_path.exists():
            raise OptionsError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise OptionsError(f"Failed to parse {config_path}: {e}") from e

        return cls.from_dict(data)
