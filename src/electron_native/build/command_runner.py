"""External command execution.

Runs build tools (electron-rebuild, node-gyp) as blocking subprocesses whose
output goes straight to the console.

Design:
    - Commands are plain argument lists so callers and tests can inspect them
    - Standard streams are inherited, nothing is captured
    - No timeout: a hung tool blocks the run
    - On Ctrl+C the tool's whole process tree is terminated before the
      interrupt propagates
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import psutil


class CommandNotFoundError(Exception):
    """Raised when the executable of a command does not exist."""

    pass


@dataclass
class CommandResult:
    """Exit status of a finished command."""

    command: List[str]
    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs commands with inherited standard streams."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def run(
        self,
        command: List[str],
        cwd: Optional[Path] = None,
        env_overrides: Optional[Dict[str, str]] = None
    ) -> CommandResult:
        """
        Run a command to completion.

        Args:
            command: Executable followed by its arguments
            cwd: Working directory for the command
            env_overrides: Variables added to the inherited environment

        Returns:
            CommandResult with the exit code

        Raises:
            CommandNotFoundError: If the executable cannot be found
        """
        env = None
        if env_overrides:
            env = dict(os.environ)
            env.update(env_overrides)

        if self.verbose:
            print(f"  $ {' '.join(command)}")

        try:
            proc = subprocess.Popen(command, cwd=str(cwd) if cwd else None, env=env)
        except FileNotFoundError as e:
            raise CommandNotFoundError(
                f"Command not found: {command[0]}. Make sure it is installed and on PATH."
            ) from e

        try:
            returncode = proc.wait()
        except KeyboardInterrupt:
            kill_process_tree(proc.pid)
            raise

        logging.debug(f"Command {command} exited with {returncode}")
        return CommandResult(command=list(command), returncode=returncode)


def kill_process_tree(root_pid: int) -> int:
    """Terminate a process and all of its children.

    Children are terminated before their parents; anything still alive after
    3 seconds is killed.

    Returns:
        Number of processes signalled
    """
    try:
        root = psutil.Process(root_pid)
        processes = root.children(recursive=True)
        processes.reverse()
        processes.append(root)
    except psutil.NoSuchProcess:
        return 0

    killed_count = 0
    for proc in processes:
        try:
            proc.terminate()
            killed_count += 1
        except psutil.NoSuchProcess:
            pass
        except psutil.AccessDenied as e:
            logging.warning(f"Failed to terminate process {proc.pid}: {e}")

    _gone, alive = psutil.wait_procs(processes, timeout=3)

    for proc in alive:
        try:
            proc.kill()
            logging.warning(f"Force killed stubborn process {proc.pid}")
        except psutil.NoSuchProcess:
            pass
        except psutil.AccessDenied as e:
            logging.warning(f"Failed to force kill process {proc.pid}: {e}")

    return killed_count
