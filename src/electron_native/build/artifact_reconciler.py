"""
Artifact reconciliation.

Copies every Electron binary into the output tree and computes the
substitution map values. All copies happen before any value is computed, so a
failed copy never leaves a map entry pointing at a file that is not there.

Output layout:
    <output root>/
    └── <output sub-path>/      # per module, or the global outputPath
        └── <binary>.node       # target artifact, original file name
"""

import ntpath
import posixpath
import shutil
from pathlib import Path
from typing import Dict

from tqdm import tqdm

from .artifacts import PlannedArtifact


class ReconcileError(Exception):
    """Raised when artifacts cannot be placed in the output directory."""

    pass


class ArtifactReconciler:
    """Places rebuilt binaries in the output directory."""

    def __init__(self, output_root: Path, default_output_path: str, show_progress: bool = True):
        """
        Args:
            output_root: Bundle output directory
            default_output_path: Sub-path for artifacts without their own
            show_progress: Whether to show a copy progress bar
        """
        self.output_root = Path(output_root)
        self.default_output_path = default_output_path
        self.show_progress = show_progress

    def reconcile(self, plan: Dict[str, PlannedArtifact]) -> Dict[str, str]:
        """
        Copy target artifacts and build the substitution map.

        Running this twice with the same plan yields the same map and the
        same output files.

        Args:
            plan: Runtime artifact name -> planned artifact

        Returns:
            Runtime artifact name -> output-relative path of its replacement

        Raises:
            ReconcileError: If a directory cannot be created or a copy fails
        """
        for planned in tqdm(
            list(plan.values()),
            desc="Copying native modules",
            unit="file",
            disable=not self.show_progress or not plan,
        ):
            self._copy(planned)

        return {key: self.relative_target(planned) for key, planned in plan.items()}

    def target_directory(self, planned: PlannedArtifact) -> Path:
        return self.output_root / self._sub_path(planned)

    def relative_target(self, planned: PlannedArtifact) -> str:
        """Map value: <sub path>/<binary name>, normalized, forward slashes."""
        return posixpath.normpath(posixpath.join(self._sub_path(planned), planned.pair.target_artifact.name))

    def _sub_path(self, planned: PlannedArtifact) -> str:
        """
        Output sub-path of an artifact, always inside the output root.

        A leading drive or slash is dropped, so "/native" lands in
        <output root>/native.

        Raises:
            ReconcileError: If the sub-path climbs out of the output root
        """
        raw = (planned.output_path or self.default_output_path).replace("\\", "/")
        _, rest = ntpath.splitdrive(raw)
        sub_path = posixpath.normpath(rest.lstrip("/") or ".")
        if sub_path == ".." or sub_path.startswith("../"):
            raise ReconcileError(
                f"Output path '{raw}' for {planned.pair.key} is outside {self.output_root}"
            )
        return sub_path

    def _copy(self, planned: PlannedArtifact) -> Path:
        target_dir = self.target_directory(planned)
        destination = target_dir / planned.pair.target_artifact.name
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(planned.pair.target_artifact, destination)
        except OSError as e:
            raise ReconcileError(
                f"Failed to copy {planned.pair.target_artifact} to {destination}: {e}"
            ) from e
        return destination
