"""User native module compilation.

This module builds native add-ons that live in the application's own source
tree (directories with a binding.gyp) for both Node and Electron.

Design:
    - ModuleBuilder is the interface the build coordinator depends on
    - NodeGypModuleBuilder compiles twice with node-gyp, staging each binary
      in its own directory since both builds produce the same file name
    - A module whose staged binaries are newer than its sources, and were built
      with the same debug flag and Electron version, is not rebuilt
"""

import hashlib
import json
import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from ..config.options import ConfigOptions, ModuleDescriptor
from .artifact_locator import NATIVE_EXTENSION, ArtifactLocator
from .artifacts import ArtifactPair
from .command_runner import CommandRunner


class ModuleBuildError(Exception):
    """Raised when a user module fails to build."""

    pass


class ModuleBuilder(ABC):
    """Interface for compiling a user module from source."""

    @abstractmethod
    def compile(self, descriptor: ModuleDescriptor) -> Optional[ArtifactPair]:
        """
        Build a user module.

        Returns:
            ArtifactPair of the produced binaries, or None when nothing was
            produced for this descriptor

        Raises:
            ModuleBuildError: If the build fails
        """
        pass


class NodeGypModuleBuilder(ModuleBuilder):
    """Compiles user modules with node-gyp for Node and for Electron."""

    NODE_GYP = "node-gyp"
    ELECTRON_HEADERS_URL = "https://electronjs.org/headers"
    STAGING_DIR = Path(".electron-native") / "modules"
    STAMP_FILE = "build.json"
    EXCLUDED_DIRS = {"build", "node_modules", ".git"}

    def __init__(
        self,
        options: ConfigOptions,
        project_dir: Path,
        locator: ArtifactLocator,
        runner: CommandRunner,
        show_progress: bool = True
    ):
        self.options = options
        self.project_dir = Path(project_dir)
        self.locator = locator
        self.runner = runner
        self.show_progress = show_progress

    def compile(self, descriptor: ModuleDescriptor) -> Optional[ArtifactPair]:
        source_dir = (self.project_dir / descriptor.source).resolve()
        if not (source_dir / "binding.gyp").is_file():
            # Not a node-gyp module, nothing to build
            logging.warning(f"User module {descriptor.source} has no binding.gyp. Skipped.")
            return None

        staging = self.staging_directory(source_dir)
        node_dir = staging / "node"
        electron_dir = staging / "electron"

        debug = descriptor.effective_debug_build(self.options)
        electron_version = self.get_electron_version()
        stamp = {"debug": debug, "electron": electron_version}

        existing = self._staged_pair(node_dir, electron_dir)
        if existing is not None and not self.options.force_rebuild:
            if self._read_stamp(staging) == stamp and not self._sources_newer_than(source_dir, existing):
                if self.show_progress:
                    print(f"User module {descriptor.source} is up to date")
                return existing

        if self.show_progress:
            print(f"Building user module {descriptor.source}...")

        # A stamp only describes a complete pair
        (staging / self.STAMP_FILE).unlink(missing_ok=True)

        node_artifact = self._build(source_dir, debug, [], node_dir)
        electron_artifact = self._build(
            source_dir,
            debug,
            [f"--target={electron_version}", f"--dist-url={self.ELECTRON_HEADERS_URL}"],
            electron_dir
        )
        self._write_stamp(staging, stamp)
        return ArtifactPair.create(node_artifact, electron_artifact)

    def staging_directory(self, source_dir: Path) -> Path:
        """
        Get the staging directory for a module source.

        Keyed by the directory name plus a digest of its resolved path, so
        modules with the same directory name never share staged binaries.
        """
        digest = hashlib.sha256(source_dir.resolve().as_posix().encode("utf-8")).hexdigest()[:12]
        return self.project_dir / self.STAGING_DIR / f"{source_dir.name}-{digest}"

    def get_electron_version(self) -> str:
        """
        Read the installed Electron version.

        Raises:
            ModuleBuildError: If Electron is not installed in the project
        """
        package_json = self.project_dir / "node_modules" / "electron" / "package.json"
        try:
            with open(package_json, "r", encoding="utf-8") as f:
                version = json.load(f).get("version")
        except (OSError, json.JSONDecodeError, AttributeError) as e:
            raise ModuleBuildError(
                f"Cannot determine the Electron version from {package_json}: {e}"
            ) from e

        if not isinstance(version, str) or not version:
            raise ModuleBuildError(f"No version field in {package_json}")
        return version

    def _build(self, source_dir: Path, debug: bool, extra_args: List[str], stage_dir: Path) -> Path:
        cmd = [self.NODE_GYP, "rebuild"]
        if debug:
            cmd.append("--debug")
        cmd.extend(extra_args)

        env = {"PYTHON": self.options.python_path} if self.options.python_path else None
        result = self.runner.run(cmd, cwd=source_dir, env_overrides=env)
        if not result.success:
            raise ModuleBuildError(
                f"Build of user module {source_dir} failed: "
                + f"'{' '.join(result.command)}' exited with code {result.returncode}"
            )

        config_dir = source_dir / "build" / ("Debug" if debug else "Release")
        artifact = self.locator.first_match(config_dir, NATIVE_EXTENSION)
        if artifact is None:
            raise ModuleBuildError(f"No native binary produced in {config_dir}")

        try:
            if stage_dir.exists():
                shutil.rmtree(stage_dir)
            stage_dir.mkdir(parents=True, exist_ok=True)
            staged = stage_dir / artifact.name
            shutil.copy2(artifact, staged)
        except OSError as e:
            raise ModuleBuildError(f"Failed to stage {artifact}: {e}") from e

        return staged

    def _staged_pair(self, node_dir: Path, electron_dir: Path) -> Optional[ArtifactPair]:
        node_artifact = self.locator.first_match(node_dir, NATIVE_EXTENSION)
        electron_artifact = self.locator.first_match(electron_dir, NATIVE_EXTENSION)
        if node_artifact is None or electron_artifact is None:
            return None
        return ArtifactPair(node_artifact, electron_artifact)

    def _sources_newer_than(self, source_dir: Path, pair: ArtifactPair) -> bool:
        built_at = min(
            pair.runtime_artifact.stat().st_mtime,
            pair.target_artifact.stat().st_mtime
        )

        def is_source(path: Path) -> bool:
            relative = path.relative_to(source_dir)
            return not (set(relative.parts[:-1]) & self.EXCLUDED_DIRS)

        for source in self.locator.search(source_dir, is_source):
            if source.stat().st_mtime > built_at:
                return True
        return False

    def _read_stamp(self, staging: Path) -> Optional[dict]:
        try:
            with open(staging / self.STAMP_FILE, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError):
            return None

    def _write_stamp(self, staging: Path, stamp: dict) -> None:
        try:
            with open(staging / self.STAMP_FILE, "w", encoding="utf-8") as f:
                json.dump(stamp, f)
        except OSError as e:
            raise ModuleBuildError(f"Failed to record build parameters in {staging}: {e}") from e
