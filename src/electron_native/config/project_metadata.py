"""
package.json reader.

Only the dependency declarations are consumed: the ``dependencies`` and
``optionalDependencies`` sections, name -> version spec.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List


class ProjectMetadataError(Exception):
    """Exception raised when package.json cannot be read."""

    pass


@dataclass(frozen=True)
class DependencyDeclaration:
    """A first-level dependency declared in package.json."""

    name: str
    optional: bool = False


class ProjectMetadata:
    """
    Dependency declarations of a Node project.

    Usage:
        metadata = ProjectMetadata.load(Path("."))
        for dep in metadata.declared_dependencies(include_optional=False):
            print(dep.name, dep.optional)
    """

    FILENAME = "package.json"

    def __init__(
        self,
        dependencies: Dict[str, str],
        optional_dependencies: Dict[str, str]
    ):
        self.dependencies = dict(dependencies)
        self.optional_dependencies = dict(optional_dependencies)

    @classmethod
    def load(cls, project_dir: Path) -> "ProjectMetadata":
        """
        Read package.json from a project directory.

        Args:
            project_dir: Directory containing package.json

        Returns:
            ProjectMetadata instance

        Raises:
            ProjectMetadataError: If the file is missing or not valid JSON
        """
        package_json = Path(project_dir) / cls.FILENAME
        if not package_json.exists():
            raise ProjectMetadataError(f"{cls.FILENAME} not found in {project_dir}")

        try:
            with open(package_json, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ProjectMetadataError(f"Failed to parse {package_json}: {e}") from e

        if not isinstance(data, dict):
            raise ProjectMetadataError(f"{package_json} must contain a JSON object")

        return cls(
            cls._section(data, "dependencies", package_json),
            cls._section(data, "optionalDependencies", package_json),
        )

    @staticmethod
    def _section(data: dict, key: str, package_json: Path) -> Dict[str, str]:
        section = data.get(key) or {}
        if not isinstance(section, dict):
            raise ProjectMetadataError(f"'{key}' in {package_json} must be an object")
        return section

    def is_optional(self, name: str) -> bool:
        return name in self.optional_dependencies

    def declared_dependencies(self, include_optional: bool = False) -> List[DependencyDeclaration]:
        """
        Get the declared dependencies in declaration order.

        Args:
            include_optional: Also scan optionalDependencies entries that are
                not listed under dependencies

        Returns:
            List of DependencyDeclaration, dependencies first
        """
        names = list(self.dependencies)
        if include_optional:
            names.extend(n for n in self.optional_dependencies if n not in self.dependencies)

        return [DependencyDeclaration(name=n, optional=self.is_optional(n)) for n in names]
