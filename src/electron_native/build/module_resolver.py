"""
Node module resolution.

Locates installed packages the way Node's ``require.resolve`` does for a bare
package name: look for ``node_modules/<name>`` in the project directory and
each of its ancestors, then resolve the package's ``main`` entry.
"""

import json
from pathlib import Path
from typing import Iterator, Optional


class ModuleResolutionError(Exception):
    """Raised when an installed package's entry point cannot be resolved."""

    pass


class ModuleNotInstalledError(ModuleResolutionError):
    """Raised when no node_modules directory contains the package."""

    pass


class NodeModuleResolver:
    """Resolves package names to their installed locations."""

    ENTRY_SUFFIXES = ("", ".js", ".json", ".node")

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir).resolve()

    def package_directory(self, name: str) -> Path:
        """Package root under the project's own node_modules (may not exist)."""
        return self.project_dir / "node_modules" / name

    def find_package(self, name: str) -> Path:
        """
        Find the nearest installed copy of a package.

        Raises:
            ModuleNotInstalledError: If no node_modules/<name> directory exists
        """
        for node_modules in self._node_modules_dirs():
            candidate = node_modules / name
            if candidate.is_dir():
                return candidate

        raise ModuleNotInstalledError(f"Cannot find module '{name}'")

    def resolve_entry(self, name: str) -> Path:
        """
        Resolve a package to its main entry file.

        Raises:
            ModuleNotInstalledError: If the package is not installed
            ModuleResolutionError: If the package is installed but its entry
                point is missing or its package.json is unreadable
        """
        package_dir = self.find_package(name)
        main = self._read_main(package_dir)

        entry = self._try_entry(package_dir / main)
        if entry is None:
            raise ModuleResolutionError(
                f"Cannot resolve entry point '{main}' of module '{name}' in {package_dir}"
            )
        return entry

    def resolve_directory(self, name: str) -> Path:
        """Directory holding the package's resolved entry file."""
        return self.resolve_entry(name).parent

    def _read_main(self, package_dir: Path) -> str:
        package_json = package_dir / "package.json"
        if not package_json.exists():
            return "index.js"

        try:
            with open(package_json, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ModuleResolutionError(f"Failed to parse {package_json}: {e}") from e

        main = data.get("main") if isinstance(data, dict) else None
        if not isinstance(main, str) or not main:
            return "index.js"
        return main

    def _try_entry(self, base: Path) -> Optional[Path]:
        for suffix in self.ENTRY_SUFFIXES:
            candidate = Path(f"{base}{suffix}")
            if candidate.is_file():
                return candidate

        index = base / "index.js"
        if index.is_file():
            return index
        return None

    def _node_modules_dirs(self) -> Iterator[Path]:
        directory = self.project_dir
        while True:
            if directory.name != "node_modules":
                yield directory / "node_modules"
            if directory.parent == directory:
                return
            directory = directory.parent
