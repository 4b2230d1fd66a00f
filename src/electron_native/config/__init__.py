"""Configuration parsing modules for electron-native."""

from .options import ConfigOptions, ModuleDescriptor, OptionsError
from .project_metadata import DependencyDeclaration, ProjectMetadata, ProjectMetadataError

__all__ = [
    "ConfigOptions",
    "ModuleDescriptor",
    "OptionsError",
    "DependencyDeclaration",
    "ProjectMetadata",
    "ProjectMetadataError",
]
