"""Build coordination for user-configured native modules."""

from typing import Iterable, List

from ..config.options import ModuleDescriptor
from .artifacts import PlannedArtifact
from .module_builder import ModuleBuilder


class UserModuleBuildCoordinator:
    """Runs the module builder for every configured user module.

    A descriptor for which the builder produces nothing is skipped. Builder
    errors are not caught: a failed native build aborts the run.
    """

    def __init__(self, builder: ModuleBuilder):
        self.builder = builder

    def build_all(self, descriptors: Iterable[ModuleDescriptor]) -> List[PlannedArtifact]:
        """
        Build each user module in order.

        Args:
            descriptors: Configured user modules

        Returns:
            Produced artifact pairs, each with its module's output sub-path
        """
        planned: List[PlannedArtifact] = []
        for descriptor in descriptors:
            pair = self.builder.compile(descriptor)
            if pair is None:
                continue
            planned.append(
                PlannedArtifact(
                    pair=pair,
                    output_path=descriptor.output_path,
                    origin=f"user module {descriptor.source}"
                )
            )
        return planned
