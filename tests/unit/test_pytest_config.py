"""Checks on the pytest settings in pyproject.toml."""

import fnmatch
from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


class TestPytestConfig:
    """Test the test suite is collected in full."""

    def test_build_tests_are_not_skipped(self):
        """Test no norecursedirs pattern matches tests/unit/build."""
        with open(PYPROJECT, "rb") as f:
            settings = tomllib.load(f)["tool"]["pytest"]["ini_options"]

        patterns = settings["norecursedirs"]

        assert not any(fnmatch.fnmatch("build", pattern) for pattern in patterns)
        assert "node_modules" in patterns
