"""
Build system components for electron-native.

This module provides the rebuild pipeline including:
- Native artifact discovery
- Dependency classification
- electron-rebuild invocation
- User module compilation (node-gyp)
- Artifact reconciliation and the substitution map
"""

from .artifact_locator import NATIVE_EXTENSION, ArtifactLocator
from .artifact_reconciler import ArtifactReconciler, ReconcileError
from .artifacts import ArtifactNotFoundError, ArtifactPair, PlannedArtifact, merge_artifacts
from .command_runner import CommandNotFoundError, CommandResult, CommandRunner
from .dependency_classifier import ClassificationResult, DependencyClassifier
from .module_builder import ModuleBuilder, ModuleBuildError, NodeGypModuleBuilder
from .module_resolver import ModuleNotInstalledError, ModuleResolutionError, NodeModuleResolver
from .orchestrator import NativeRebuildOrchestrator, RebuildResult
from .rebuild_invoker import NativeRebuildInvoker, RebuildError
from .substitution_map import SUBSTITUTION_MAP_FILENAME, SubstitutionMapWriter
from .user_module_coordinator import UserModuleBuildCoordinator

__all__ = [
    "NATIVE_EXTENSION",
    "ArtifactLocator",
    "ArtifactReconciler",
    "ReconcileError",
    "ArtifactNotFoundError",
    "ArtifactPair",
    "PlannedArtifact",
    "merge_artifacts",
    "CommandNotFoundError",
    "CommandResult",
    "CommandRunner",
    "ClassificationResult",
    "DependencyClassifier",
    "ModuleBuilder",
    "ModuleBuildError",
    "NodeGypModuleBuilder",
    "ModuleNotInstalledError",
    "ModuleResolutionError",
    "NodeModuleResolver",
    "NativeRebuildOrchestrator",
    "RebuildResult",
    "NativeRebuildInvoker",
    "RebuildError",
    "SUBSTITUTION_MAP_FILENAME",
    "SubstitutionMapWriter",
    "UserModuleBuildCoordinator",
]
