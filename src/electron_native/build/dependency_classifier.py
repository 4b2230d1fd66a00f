"""
Dependency classification.

Decides, for each first-level dependency in package.json, whether it must be
rebuilt for Electron:
- optional and not installed: skipped with a warning
- not resolvable otherwise: skipped with an error asking the user to fix it
- installed and ships a .node binary: rebuilt
- installed and pure JavaScript: ignored
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from ..config.project_metadata import DependencyDeclaration
from .artifact_locator import NATIVE_EXTENSION, ArtifactLocator
from .module_resolver import ModuleNotInstalledError, ModuleResolutionError, NodeModuleResolver


@dataclass
class ClassificationResult:
    """Outcome of classifying a project's dependencies.

    Every list preserves declaration order.
    """

    rebuild: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    non_native: List[str] = field(default_factory=list)


class DependencyClassifier:
    """Sorts declared dependencies into rebuild / skip / ignore."""

    def __init__(self, resolver: NodeModuleResolver, locator: ArtifactLocator):
        self.resolver = resolver
        self.locator = locator

    def classify(self, declarations: Iterable[DependencyDeclaration]) -> ClassificationResult:
        """
        Classify declared dependencies.

        Resolution problems never raise: the dependency is skipped and a
        message is logged so one broken package cannot block the others.

        Args:
            declarations: Dependencies in declaration order

        Returns:
            ClassificationResult
        """
        result = ClassificationResult()

        for dep in declarations:
            try:
                module_dir = self.resolver.resolve_directory(dep.name)
            except ModuleNotInstalledError:
                if dep.optional:
                    logging.warning(
                        f"Module {dep.name}, configured in your package.json as optional, not found. Skipped."
                    )
                else:
                    logging.error(
                        f"Module {dep.name}, configured in your package.json, not found. "
                        + "Please, check your dependencies."
                    )
                result.skipped.append(dep.name)
                continue
            except ModuleResolutionError as e:
                logging.error(
                    f"Module {dep.name}, configured in your package.json, could not be resolved ({e}). "
                    + "Please, check your dependencies."
                )
                result.skipped.append(dep.name)
                continue

            if self.is_native(dep.name, module_dir):
                result.rebuild.append(dep.name)
            else:
                result.non_native.append(dep.name)

        return result

    def is_native(self, name: str, module_dir: Path) -> bool:
        """A module is native iff a .node file exists under its directory."""
        native = bool(self.locator.search(module_dir, NATIVE_EXTENSION))
        logging.debug(f"Module {name} at {module_dir}: native={native}")
        return native
