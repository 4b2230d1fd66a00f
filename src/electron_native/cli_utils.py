"""CLI utility functions for electron-native.

This module provides common utilities used across CLI commands including:
- Option loading from config files and flags
- Error handling and formatting
- Logging setup
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from electron_native.config import ConfigOptions, ModuleDescriptor
from electron_native.config.options import check_output_path

DEFAULT_CONFIG_FILENAME = "electron-native.json"
CONSOLE_HANDLER_NAME = "electron-native-console"


class OptionsLoader:
    """Builds ConfigOptions from a config file plus command-line overrides."""

    @staticmethod
    def load(
        project_dir: Path,
        config_path: Optional[Path] = None,
        force_rebuild: bool = False,
        debug_build: bool = False,
        parallel_build: bool = False,
        optional_dependencies: bool = False,
        python_path: Optional[str] = None,
        output_path: Optional[str] = None,
        user_modules: Optional[List[str]] = None,
    ) -> ConfigOptions:
        """Load options for a run.

        The config file is the explicit one if given, else electron-native.json
        in the project directory when it exists. Flags only ever switch
        settings on or add to them.

        Raises:
            OptionsError: If the config file is invalid
        """
        if config_path is None:
            default_config = project_dir / DEFAULT_CONFIG_FILENAME
            if default_config.exists():
                config_path = default_config

        options = ConfigOptions.from_file(config_path) if config_path else ConfigOptions()

        options.force_rebuild = options.force_rebuild or force_rebuild
        options.debug_build = options.debug_build or debug_build
        options.parallel_build = options.parallel_build or parallel_build
        options.optional_dependencies = options.optional_dependencies or optional_dependencies
        if python_path:
            options.python_path = python_path
        if output_path:
            options.output_path = check_output_path(output_path, "--output-path")
        for source in user_modules or []:
            options.user_modules.append(ModuleDescriptor(source=source, output_path=options.output_path))

        return options


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Rebuild failed")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        print()
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_file_not_found(error: FileNotFoundError) -> None:
        """Handle FileNotFoundError with standard formatting."""
        ErrorFormatter.print_error("Error: File not found", str(error))
        print("Make sure you're in an Electron project directory with a package.json file.")
        sys.exit(1)

    @staticmethod
    def handle_permission_error(error: PermissionError) -> None:
        ErrorFormatter.print_error("Error: Permission denied", str(error))
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Rebuild interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)


class PathValidator:
    """Validates project paths and directories."""

    @staticmethod
    def validate_project_dir(project_dir: Path) -> None:
        """Validate that project directory exists and is a directory.

        Raises:
            SystemExit: If path doesn't exist or isn't a directory
        """
        if not project_dir.exists():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path does not exist: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)
        if not project_dir.is_dir():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path is not a directory: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)


def setup_logging(verbose: bool = False) -> None:
    """Send log records to the console, DEBUG and up when verbose.

    Safe to call more than once: the console handler is installed once and
    later calls only adjust the level.
    """
    logger = logging.getLogger()
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    for handler in logger.handlers:
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            handler.setLevel(level)
            return

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    logger.addHandler(console_handler)
