"""
Rebuild orchestration for Electron bundles.

This module drives one complete run, from reading package.json to writing the
substitution map (after creating the output root):
1. Read dependency declarations from package.json
2. Classify dependencies (skip / rebuild / ignore)
3. Rebuild each native dependency with electron-rebuild
4. Build user modules from source
5. Copy Electron binaries into the output tree
6. Write the substitution map

Phases run strictly one after another. Any failure after classification aborts
the run before the map is written, so a failed run never leaves a new map.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..config.options import ConfigOptions
from ..config.project_metadata import ProjectMetadata, ProjectMetadataError
from .artifact_locator import ArtifactLocator
from .artifact_reconciler import ArtifactReconciler, ReconcileError
from .artifacts import ArtifactNotFoundError, PlannedArtifact, merge_artifacts
from .command_runner import CommandNotFoundError, CommandRunner
from .dependency_classifier import DependencyClassifier
from .module_builder import ModuleBuilder, ModuleBuildError, NodeGypModuleBuilder
from .module_resolver import NodeModuleResolver
from .rebuild_invoker import NativeRebuildInvoker, RebuildError
from .substitution_map import SubstitutionMapWriter
from .user_module_coordinator import UserModuleBuildCoordinator

DEFAULT_OUTPUT_ROOT = "./dist"


@dataclass
class RebuildResult:
    """Result of a complete rebuild run."""

    success: bool
    substitution_map: Dict[str, str]
    map_path: Optional[Path]
    rebuilt: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    user_modules: List[str] = field(default_factory=list)
    build_time: float = 0.0
    message: str = ""


class NativeRebuildOrchestrator:
    """
    Orchestrates native module rebuilds for an Electron project.

    Example usage:
        orchestrator = NativeRebuildOrchestrator(Path("."), ConfigOptions())
        result = orchestrator.rebuild(Path("dist"))
        if result.success:
            print(f"Substitution map: {result.map_path}")
    """

    def __init__(
        self,
        project_dir: Path,
        options: ConfigOptions,
        runner: Optional[CommandRunner] = None,
        module_builder: Optional[ModuleBuilder] = None,
        working_dir: Optional[Path] = None,
        verbose: bool = False,
        show_progress: bool = True
    ):
        """
        Initialize the orchestrator.

        Args:
            project_dir: Directory containing package.json and node_modules
            options: Rebuild options
            runner: Command runner for external tools (optional)
            module_builder: Builder for user modules (defaults to node-gyp)
            working_dir: Where the substitution map is written (defaults to
                project_dir)
            verbose: Print phase headers
            show_progress: Print per-module progress
        """
        self.project_dir = Path(project_dir).resolve()
        self.options = options
        self.verbose = verbose
        self.show_progress = show_progress
        self.working_dir = Path(working_dir) if working_dir else self.project_dir

        self.locator = ArtifactLocator()
        self.resolver = NodeModuleResolver(self.project_dir)
        self.runner = runner or CommandRunner(verbose=verbose)
        self.module_builder = module_builder or NodeGypModuleBuilder(
            options, self.project_dir, self.locator, self.runner, show_progress
        )

    def rebuild(self, output_root: Optional[Path] = None) -> RebuildResult:
        """
        Execute a complete rebuild run.

        Args:
            output_root: Bundle output directory, relative paths are taken
                from the project directory (defaults to ./dist)

        Returns:
            RebuildResult; on failure success is False and message holds the
            error that aborted the run
        """
        start_time = time.time()
        result = RebuildResult(success=False, substitution_map={}, map_path=None)

        try:
            output_dir = self.project_dir / (output_root or DEFAULT_OUTPUT_ROOT)
            output_dir.mkdir(parents=True, exist_ok=True)

            self._phase(1, "Reading package.json...")
            metadata = ProjectMetadata.load(self.project_dir)
            declarations = metadata.declared_dependencies(self.options.optional_dependencies)

            self._phase(2, "Scanning dependencies for native modules...")
            classifier = DependencyClassifier(self.resolver, self.locator)
            classification = classifier.classify(declarations)
            result.skipped = classification.skipped
            if self.verbose:
                print(f"      Native: {', '.join(classification.rebuild) or 'none'}")

            self._phase(3, "Rebuilding native dependencies...")
            invoker = NativeRebuildInvoker(
                self.options, self.resolver, self.locator, self.runner, self.show_progress
            )
            dependency_artifacts: List[PlannedArtifact] = []
            for name in classification.rebuild:
                pair = invoker.rebuild(name)
                dependency_artifacts.append(PlannedArtifact(pair=pair, origin=f"dependency {name}"))
                result.rebuilt.append(name)

            self._phase(4, "Building user modules...")
            coordinator = UserModuleBuildCoordinator(self.module_builder)
            user_artifacts = coordinator.build_all(self.options.user_modules)
            result.user_modules = [planned.pair.key for planned in user_artifacts]

            self._phase(5, "Copying native modules...")
            plan = merge_artifacts(dependency_artifacts, user_artifacts)
            reconciler = ArtifactReconciler(
                output_dir, self.options.output_path, self.show_progress
            )
            substitution_map = reconciler.reconcile(plan)

            self._phase(6, "Writing substitution map...")
            map_path = SubstitutionMapWriter(self.working_dir).write(substitution_map)

            result.success = True
            result.substitution_map = substitution_map
            result.map_path = map_path
            result.message = "Rebuild successful"

        except (
            ProjectMetadataError,
            RebuildError,
            ArtifactNotFoundError,
            CommandNotFoundError,
            ModuleBuildError,
            ReconcileError,
        ) as e:
            result.message = str(e)
        except OSError as e:
            result.message = f"Filesystem error: {e}"

        result.build_time = time.time() - start_time
        return result

    def _phase(self, number: int, title: str) -> None:
        if self.verbose:
            print(f"[{number}/6] {title}")
