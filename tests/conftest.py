"""Shared fixtures for electron-native tests.

Builds fake Node projects on disk and provides a command runner that imitates
electron-rebuild and node-gyp without running anything.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from electron_native.build.command_runner import CommandResult


class FakeNodeProject:
    """A Node project directory with a package.json and node_modules."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def write_package_json(
        self,
        dependencies: Optional[Dict[str, str]] = None,
        optional_dependencies: Optional[Dict[str, str]] = None
    ) -> Path:
        data = {"name": "app", "version": "1.0.0"}
        if dependencies is not None:
            data["dependencies"] = dependencies
        if optional_dependencies is not None:
            data["optionalDependencies"] = optional_dependencies
        path = self.root / "package.json"
        path.write_text(json.dumps(data))
        return path

    def install(self, name: str, native: bool = False, main: str = "index.js") -> Path:
        """Install a package; native packages get build/Release/<name>.node."""
        package_dir = self.root / "node_modules" / name
        package_dir.mkdir(parents=True, exist_ok=True)
        (package_dir / "package.json").write_text(json.dumps({"name": name, "main": main}))
        entry = package_dir / main
        entry.parent.mkdir(parents=True, exist_ok=True)
        entry.write_text("module.exports = {};\n")
        if native:
            binary = entry.parent / "build" / "Release" / f"{name}.node"
            binary.parent.mkdir(parents=True, exist_ok=True)
            binary.write_bytes(b"node-abi")
        return package_dir

    def user_module(self, relative: str, binary_name: str = "addon") -> Path:
        source = self.root / relative
        source.mkdir(parents=True, exist_ok=True)
        (source / "binding.gyp").write_text(json.dumps({"targets": [{"target_name": binary_name}]}))
        (source / "addon.cc").write_text("// addon\n")
        return source

    def install_electron(self, version: str = "28.1.0") -> None:
        electron_dir = self.root / "node_modules" / "electron"
        electron_dir.mkdir(parents=True, exist_ok=True)
        (electron_dir / "package.json").write_text(json.dumps({"name": "electron", "version": version}))


class FakeRunner:
    """Records commands and imitates the build tools' output files.

    electron-rebuild ``-o <name>`` writes node_modules/<name>/bin/<name>.node
    under the working directory; ``node-gyp rebuild`` writes
    build/<Release|Debug>/<target>.node under the module source.
    """

    def __init__(self, returncodes: Optional[Dict[str, int]] = None, produce: bool = True):
        self.calls: List[dict] = []
        self.returncodes = returncodes or {}
        self.produce = produce

    def run(self, command, cwd=None, env_overrides=None) -> CommandResult:
        self.calls.append({"command": list(command), "cwd": cwd, "env": env_overrides})
        cwd = Path(cwd)

        if "-o" in command:
            name = command[command.index("-o") + 1]
            returncode = self.returncodes.get(name, 0)
            if returncode == 0 and self.produce:
                binary = cwd / "node_modules" / name / "bin" / "linux-x64-119" / f"{name}.node"
                binary.parent.mkdir(parents=True, exist_ok=True)
                binary.write_bytes(b"electron-abi:" + name.encode())
            return CommandResult(command=list(command), returncode=returncode)

        if command[:2] == ["node-gyp", "rebuild"]:
            returncode = self.returncodes.get(cwd.name, 0)
            if returncode == 0 and self.produce:
                config = "Debug" if "--debug" in command else "Release"
                target = json.loads((cwd / "binding.gyp").read_text())["targets"][0]["target_name"]
                binary = cwd / "build" / config / f"{target}.node"
                binary.parent.mkdir(parents=True, exist_ok=True)
                flavour = "electron" if any(a.startswith("--target=") for a in command) else "node"
                binary.write_bytes(flavour.encode())
            return CommandResult(command=list(command), returncode=returncode)

        return CommandResult(command=list(command), returncode=0)

    @property
    def commands(self) -> List[List[str]]:
        return [call["command"] for call in self.calls]


@pytest.fixture
def node_project(tmp_path):
    """Create an empty fake Node project."""
    return FakeNodeProject(tmp_path / "app")


@pytest.fixture
def fake_runner():
    """Create a fake command runner that always succeeds."""
    return FakeRunner()


@pytest.fixture
def make_runner():
    """Factory for fake runners with custom exit codes."""
    return FakeRunner
