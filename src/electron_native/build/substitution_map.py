"""
Substitution map persistence.

The map file is the contract with the bundler side: keys are the file names
of the binaries Node would load, values the output-relative paths of their
Electron replacements. It is rewritten from scratch on every run.
"""

import json
from pathlib import Path
from typing import Dict

SUBSTITUTION_MAP_FILENAME = "ElectronNativeSubstitutionMap.json"


class SubstitutionMapWriter:
    """Writes the substitution map into a working directory."""

    def __init__(self, working_dir: Path):
        self.working_dir = Path(working_dir)

    @property
    def map_path(self) -> Path:
        return self.working_dir / SUBSTITUTION_MAP_FILENAME

    def write(self, mapping: Dict[str, str]) -> Path:
        """Serialize the map, replacing any previous file.

        Returns:
            Path of the written file
        """
        with open(self.map_path, "w", encoding="utf-8") as f:
            json.dump(mapping, f, indent=2)
            f.write("\n")
        return self.map_path

    @staticmethod
    def read(working_dir: Path) -> Dict[str, str]:
        """Load the map written by a previous run.

        Raises:
            FileNotFoundError: If no map exists in working_dir
        """
        with open(Path(working_dir) / SUBSTITUTION_MAP_FILENAME, "r", encoding="utf-8") as f:
            return json.load(f)
