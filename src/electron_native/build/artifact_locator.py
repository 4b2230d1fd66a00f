"""
Native artifact discovery.

Searches directory trees for compiled add-ons (.node files) or any file
matching a predicate. Results are deterministic for a given filesystem state:
each directory's files come first in name order, then its sub-directories in
name order.
"""

import os
from pathlib import Path
from typing import Callable, List, Optional, Union

NATIVE_EXTENSION = "node"

FileMatcher = Union[str, Callable[[Path], bool]]


class ArtifactLocator:
    """Recursive, read-only file search."""

    def search(self, root: Path, matcher: FileMatcher) -> List[Path]:
        """
        Find every file under root accepted by the matcher.

        Args:
            root: Directory to search (a missing directory yields no matches)
            matcher: File extension, with or without the leading dot, or a
                predicate called with each file path

        Returns:
            Matching file paths in deterministic order
        """
        root = Path(root)
        if not root.is_dir():
            return []

        accepts = self._make_predicate(matcher)
        matches: List[Path] = []
        self._walk(root, accepts, matches)
        return matches

    def first_match(self, root: Path, matcher: FileMatcher) -> Optional[Path]:
        """
        Pick one artifact from a directory tree.

        When several files match, the first one in search order wins. Packages
        that ship more than one binary get whichever sorts first, not
        necessarily the one the package loads.

        Returns:
            First matching path, or None when nothing matches
        """
        matches = self.search(root, matcher)
        return matches[0] if matches else None

    def _walk(self, directory: Path, accepts: Callable[[Path], bool], matches: List[Path]) -> None:
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError:
            return

        subdirs = []
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                subdirs.append(Path(entry.path))
            elif entry.is_file():
                path = Path(entry.path)
                if accepts(path):
                    matches.append(path)

        for subdir in subdirs:
            self._walk(subdir, accepts, matches)

    @staticmethod
    def _make_predicate(matcher: FileMatcher) -> Callable[[Path], bool]:
        if callable(matcher):
            return matcher

        suffix = matcher if matcher.startswith(".") else f".{matcher}"
        return lambda path: path.suffix == suffix
