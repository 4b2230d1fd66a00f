"""
Command-line interface for electron-native.

This module provides the `electron-native` CLI tool, run as a build step
before bundling an Electron application.
"""

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from electron_native.build import NativeRebuildOrchestrator
from electron_native.build.substitution_map import SubstitutionMapWriter
from electron_native.cli_utils import (
    ErrorFormatter,
    OptionsLoader,
    PathValidator,
    setup_logging,
)
from electron_native.config import OptionsError


@dataclass
class RebuildArgs:
    """Arguments for the rebuild command."""

    project_dir: Path
    output_root: Optional[Path] = None
    config: Optional[Path] = None
    force: bool = False
    debug: bool = False
    parallel: bool = False
    optional_dependencies: bool = False
    python: Optional[str] = None
    output_path: Optional[str] = None
    user_modules: List[str] = field(default_factory=list)
    verbose: bool = False


def rebuild_command(args: RebuildArgs) -> None:
    """Rebuild native modules for Electron and write the substitution map.

    Examples:
        electron-native rebuild                    # Rebuild current project into ./dist
        electron-native rebuild -o build/app       # Custom output root
        electron-native rebuild -f -p              # Force, parallel rebuild
        electron-native rebuild -u native/addon    # Also build a user module
    """
    print("electron-native v0.1.0")
    print()

    setup_logging(args.verbose)

    try:
        options = OptionsLoader.load(
            args.project_dir,
            config_path=args.config,
            force_rebuild=args.force,
            debug_build=args.debug,
            parallel_build=args.parallel,
            optional_dependencies=args.optional_dependencies,
            python_path=args.python,
            output_path=args.output_path,
            user_modules=args.user_modules,
        )

        orchestrator = NativeRebuildOrchestrator(
            args.project_dir, options, verbose=args.verbose
        )
        result = orchestrator.rebuild(args.output_root)

        if result.success:
            ErrorFormatter.print_success("Rebuild successful!")
            print()
            print(f"Native dependencies rebuilt: {len(result.rebuilt)}")
            print(f"User modules built: {len(result.user_modules)}")
            if result.skipped:
                print(f"Skipped: {', '.join(result.skipped)}")
            print(f"Substitution map: {result.map_path}")
            print(f"Rebuild time: {result.build_time:.2f}s")
            sys.exit(0)
        else:
            ErrorFormatter.print_error("Rebuild failed!", result.message)
            sys.exit(1)

    except OptionsError as e:
        ErrorFormatter.print_error("Invalid options", str(e))
        sys.exit(1)
    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except PermissionError as e:
        ErrorFormatter.handle_permission_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def show_map_command(project_dir: Path) -> None:
    """Print the substitution map of the last successful run."""
    try:
        mapping = SubstitutionMapWriter.read(project_dir)
    except FileNotFoundError as e:
        ErrorFormatter.print_error("No substitution map", str(e))
        print("Run 'electron-native rebuild' first.")
        sys.exit(1)
    except json.JSONDecodeError as e:
        ErrorFormatter.print_error("Corrupt substitution map", str(e))
        sys.exit(1)

    for runtime_artifact, target in mapping.items():
        print(f"{runtime_artifact} -> {target}")
    sys.exit(0)


def main() -> None:
    """electron-native - rebuild native Node modules for Electron bundles."""
    parser = argparse.ArgumentParser(
        prog="electron-native",
        description="Rebuild native Node modules for Electron bundles",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="electron-native 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Rebuild command
    rebuild_parser = subparsers.add_parser(
        "rebuild",
        help="Rebuild native modules and write the substitution map",
    )
    rebuild_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    rebuild_parser.add_argument(
        "-o",
        "--output-root",
        type=Path,
        default=None,
        help="Bundle output directory (default: ./dist)",
    )
    rebuild_parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="JSON options file (default: electron-native.json if present)",
    )
    rebuild_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Force rebuild even if binaries are up to date",
    )
    rebuild_parser.add_argument(
        "-b",
        "--debug",
        action="store_true",
        help="Build debug binaries",
    )
    rebuild_parser.add_argument(
        "-p",
        "--parallel",
        action="store_true",
        help="Let electron-rebuild build in parallel",
    )
    rebuild_parser.add_argument(
        "--optional-dependencies",
        action="store_true",
        help="Also scan optionalDependencies for native modules",
    )
    rebuild_parser.add_argument(
        "--python",
        default=None,
        help="Python interpreter for node-gyp",
    )
    rebuild_parser.add_argument(
        "--output-path",
        default=None,
        help="Default output sub-path for native binaries (default: ./)",
    )
    rebuild_parser.add_argument(
        "-u",
        "--user-module",
        action="append",
        default=[],
        dest="user_modules",
        help="Source directory of a user native module (repeatable)",
    )
    rebuild_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    # Show-map command
    show_map_parser = subparsers.add_parser(
        "show-map",
        help="Show the substitution map of the last run",
    )
    show_map_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )

    # Parse arguments
    parsed_args = parser.parse_args()

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    PathValidator.validate_project_dir(parsed_args.project_dir)

    if parsed_args.command == "rebuild":
        rebuild_args = RebuildArgs(
            project_dir=parsed_args.project_dir,
            output_root=parsed_args.output_root,
            config=parsed_args.config,
            force=parsed_args.force,
            debug=parsed_args.debug,
            parallel=parsed_args.parallel,
            optional_dependencies=parsed_args.optional_dependencies,
            python=parsed_args.python,
            output_path=parsed_args.output_path,
            user_modules=parsed_args.user_modules,
            verbose=parsed_args.verbose,
        )
        rebuild_command(rebuild_args)
    elif parsed_args.command == "show-map":
        show_map_command(parsed_args.project_dir)


if __name__ == "__main__":
    main()
