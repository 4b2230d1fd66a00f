"""
Artifact pairs and the merged substitution plan.

An ArtifactPair links the binary Node loads during development (runtime
artifact) to the binary rebuilt for Electron (target artifact). Pairs are
keyed by the runtime artifact's file name, which is what the running process
asks the loader for.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional


class ArtifactNotFoundError(Exception):
    """Raised when an expected build artifact does not exist."""

    pass


@dataclass(frozen=True)
class ArtifactPair:
    """Runtime-ABI binary and its target-ABI replacement."""

    runtime_artifact: Path
    target_artifact: Path

    @property
    def key(self) -> str:
        return self.runtime_artifact.name

    @classmethod
    def create(cls, runtime_artifact: Optional[Path], target_artifact: Optional[Path]) -> "ArtifactPair":
        """
        Create a pair, checking both files exist.

        Raises:
            ArtifactNotFoundError: If either artifact is missing
        """
        if runtime_artifact is None or not Path(runtime_artifact).is_file():
            raise ArtifactNotFoundError(f"Runtime artifact not found: {runtime_artifact}")
        if target_artifact is None or not Path(target_artifact).is_file():
            raise ArtifactNotFoundError(f"Target artifact not found: {target_artifact}")
        return cls(Path(runtime_artifact), Path(target_artifact))


@dataclass(frozen=True)
class PlannedArtifact:
    """An artifact pair with its output sub-path (None means the default)."""

    pair: ArtifactPair
    output_path: Optional[str] = None
    origin: str = ""


def merge_artifacts(*groups: Iterable[PlannedArtifact]) -> Dict[str, PlannedArtifact]:
    """
    Merge artifact groups into one plan keyed by runtime artifact name.

    Later entries replace earlier ones with the same key; the replacement is
    logged so colliding file names do not go unnoticed.
    """
    plan: Dict[str, PlannedArtifact] = {}
    for group in groups:
        for planned in group:
            key = planned.pair.key
            previous = plan.get(key)
            if previous is not None:
                logging.warning(
                    f"Native artifact {key} from {planned.origin or planned.pair.target_artifact} "
                    + f"replaces the one from {previous.origin or previous.pair.target_artifact}"
                )
            plan[key] = planned
    return plan
