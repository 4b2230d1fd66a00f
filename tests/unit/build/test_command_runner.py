"""Tests for external command execution."""

import sys
from unittest.mock import MagicMock, patch

import psutil
import pytest

from electron_native.build import CommandNotFoundError, CommandRunner
from electron_native.build.command_runner import kill_process_tree


class TestCommandRunner:
    """Test running real subprocesses."""

    def test_success(self, tmp_path):
        """Test a zero exit code."""
        runner = CommandRunner()

        result = runner.run([sys.executable, "-c", "pass"], cwd=tmp_path)

        assert result.success
        assert result.returncode == 0
        assert result.command[0] == sys.executable

    def test_failure_exit_code(self, tmp_path):
        """Test a non-zero exit code is reported, not raised."""
        runner = CommandRunner()

        result = runner.run([sys.executable, "-c", "import sys; sys.exit(3)"], cwd=tmp_path)

        assert not result.success
        assert result.returncode == 3

    def test_runs_in_working_directory(self, tmp_path):
        """Test the command runs in cwd."""
        runner = CommandRunner()
        script = "open('marker.txt', 'w').write('x')"

        runner.run([sys.executable, "-c", script], cwd=tmp_path)

        assert (tmp_path / "marker.txt").exists()

    def test_env_overrides(self, tmp_path):
        """Test extra environment variables reach the command."""
        runner = CommandRunner()
        script = "import os, sys; sys.exit(0 if os.environ.get('PYTHON') == '/opt/py' else 1)"

        result = runner.run([sys.executable, "-c", script], cwd=tmp_path, env_overrides={"PYTHON": "/opt/py"})

        assert result.success

    def test_command_not_found(self, tmp_path):
        """Test a missing executable raises CommandNotFoundError."""
        runner = CommandRunner()

        with pytest.raises(CommandNotFoundError, match="definitely-not-a-real-tool"):
            runner.run(["definitely-not-a-real-tool-xyz"], cwd=tmp_path)

    def test_verbose_echoes_command(self, tmp_path, capsys):
        """Test verbose mode prints the command line."""
        runner = CommandRunner(verbose=True)

        runner.run([sys.executable, "-c", "pass"], cwd=tmp_path)

        assert "$ " in capsys.readouterr().out

    def test_keyboard_interrupt_kills_tree(self, tmp_path):
        """Test Ctrl+C terminates the process tree and re-raises."""
        runner = CommandRunner()
        proc = MagicMock()
        proc.pid = 4242
        proc.wait.side_effect = KeyboardInterrupt

        with (
            patch("electron_native.build.command_runner.subprocess.Popen", return_value=proc),
            patch("electron_native.build.command_runner.kill_process_tree") as mock_kill,
        ):
            with pytest.raises(KeyboardInterrupt):
                runner.run(["electron-rebuild"], cwd=tmp_path)

        mock_kill.assert_called_once_with(4242)


class TestKillProcessTree:
    """Test process tree termination."""

    def test_children_terminated_before_root(self):
        """Test every process is terminated, children first."""
        root = MagicMock(pid=1)
        child = MagicMock(pid=2)
        grandchild = MagicMock(pid=3)
        root.children.return_value = [child, grandchild]
        order = []
        for proc in (root, child, grandchild):
            proc.terminate.side_effect = lambda p=proc: order.append(p.pid)

        with (
            patch("electron_native.build.command_runner.psutil.Process", return_value=root),
            patch("electron_native.build.command_runner.psutil.wait_procs", return_value=([], [])),
        ):
            killed = kill_process_tree(1)

        assert killed == 3
        assert order == [3, 2, 1]

    def test_stragglers_are_killed(self):
        """Test processes alive after the grace period are killed."""
        root = MagicMock(pid=1)
        root.children.return_value = []

        with (
            patch("electron_native.build.command_runner.psutil.Process", return_value=root),
            patch("electron_native.build.command_runner.psutil.wait_procs", return_value=([], [root])),
        ):
            kill_process_tree(1)

        root.kill.assert_called_once()

    def test_process_already_gone(self):
        """Test a vanished root process is not an error."""
        with patch(
            "electron_native.build.command_runner.psutil.Process",
            side_effect=psutil.NoSuchProcess(1),
        ):
            assert kill_process_tree(1) == 0
