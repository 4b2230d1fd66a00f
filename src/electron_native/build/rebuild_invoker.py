"""
Native dependency rebuild.

Runs electron-rebuild for one dependency at a time and pairs the binary the
package built for Node with the one electron-rebuild produced for Electron.

Artifact locations:
    runtime artifact: first .node file under <installed dir>/build
    target artifact:  first .node file under <project>/node_modules/<name>/bin
"""

from pathlib import Path
from typing import List, Optional

from ..config.options import ConfigOptions
from .artifact_locator import NATIVE_EXTENSION, ArtifactLocator
from .artifacts import ArtifactNotFoundError, ArtifactPair
from .command_runner import CommandRunner
from .module_resolver import ModuleResolutionError, NodeModuleResolver


class RebuildError(Exception):
    """Raised when the rebuild tool fails for a dependency."""

    pass


class NativeRebuildInvoker:
    """Invokes the external rebuild tool per native dependency."""

    FORCE_FLAG = "-f"
    DEBUG_FLAG = "-b"
    PARALLEL_FLAG = "-p"
    ONLY_FLAG = "-o"

    def __init__(
        self,
        options: ConfigOptions,
        resolver: NodeModuleResolver,
        locator: ArtifactLocator,
        runner: CommandRunner,
        show_progress: bool = True
    ):
        self.options = options
        self.resolver = resolver
        self.locator = locator
        self.runner = runner
        self.show_progress = show_progress

    def build_command(self, name: str) -> List[str]:
        """Command line rebuilding exactly one dependency."""
        cmd = list(self.options.rebuild_command)
        if self.options.force_rebuild:
            cmd.append(self.FORCE_FLAG)
        if self.options.debug_build:
            cmd.append(self.DEBUG_FLAG)
        if self.options.parallel_build:
            cmd.append(self.PARALLEL_FLAG)
        cmd.extend([self.ONLY_FLAG, name])
        return cmd

    def rebuild(self, name: str) -> ArtifactPair:
        """
        Rebuild one native dependency for Electron.

        Args:
            name: Dependency name as declared in package.json

        Returns:
            ArtifactPair of the Node binary and its Electron rebuild

        Raises:
            RebuildError: If the rebuild tool exits non-zero
            ArtifactNotFoundError: If either binary is missing afterwards
            CommandNotFoundError: If the rebuild tool is not installed
        """
        if self.show_progress:
            print(f"Rebuilding native module {name}...")

        env = {"PYTHON": self.options.python_path} if self.options.python_path else None
        result = self.runner.run(
            self.build_command(name),
            cwd=self.resolver.project_dir,
            env_overrides=env
        )
        if not result.success:
            raise RebuildError(
                f"Rebuilding native module {name} failed: "
                + f"'{' '.join(result.command)}' exited with code {result.returncode}"
            )

        runtime_artifact = self._find_runtime_artifact(name)
        target_artifact = self.locator.first_match(
            self.resolver.package_directory(name) / "bin", NATIVE_EXTENSION
        )
        if target_artifact is None:
            raise ArtifactNotFoundError(
                f"No rebuilt binary found for {name} in "
                + f"{self.resolver.package_directory(name) / 'bin'}"
            )

        return ArtifactPair.create(runtime_artifact, target_artifact)

    def _find_runtime_artifact(self, name: str) -> Path:
        try:
            build_dir = self.resolver.resolve_directory(name) / "build"
        except ModuleResolutionError as e:
            raise ArtifactNotFoundError(f"Cannot locate {name} after rebuild: {e}") from e

        runtime_artifact: Optional[Path] = self.locator.first_match(build_dir, NATIVE_EXTENSION)
        if runtime_artifact is None:
            raise ArtifactNotFoundError(f"No native binary found for {name} in {build_dir}")
        return runtime_artifact
