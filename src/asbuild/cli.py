"""
Command-line interface for asbuild.

This module provides the `asbuild` CLI tool for building ActionScript
projects into SWC libraries and SWF executables.
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from asbuild import __version__
from asbuild.build import CompilerExecutor, StepRunner, TaskGraphBuilder
from asbuild.build.task_graph_builder import CLEAN, STEP_NAMES
from asbuild.cli_utils import ErrorFormatter, PathValidator, TargetSelector, setup_logging
from asbuild.config import Workspace
from asbuild.errors import BuildConfigurationError


@dataclass
class StepArgs:
    """Arguments shared by every step command."""

    step: str
    workspace_dir: Path
    project: Optional[str] = None
    clean: bool = False
    verbose: bool = False


def load_graph(args: StepArgs):
    workspace = Workspace.load(args.workspace_dir)
    executor = CompilerExecutor(show_progress=True, verbose=args.verbose)
    graph = TaskGraphBuilder(workspace, executor=executor).build_graph()
    return workspace, graph


def step_command(args: StepArgs) -> None:
    """Run a build step for one or all projects.

    Examples:
        asbuild build                        # Build every project
        asbuild build -p :core               # Build one project
        asbuild build --clean                # Clean, then build
        asbuild compile-archive game/        # Only compile SWCs
        asbuild generate-ide-descriptor      # Write .idea module files
    """
    print(f"asbuild v{__version__}")
    print()

    try:
        workspace, graph = load_graph(args)
        runner = StepRunner(graph, show_progress=True, verbose=args.verbose)

        if args.clean:
            clean_result = runner.run(TargetSelector.select_targets(workspace, CLEAN, args.project))
            if not clean_result.success:
                ErrorFormatter.print_error("Clean failed!", clean_result.message)
                sys.exit(1)

        targets = TargetSelector.select_targets(workspace, args.step, args.project)
        result = runner.run(targets)

        if result.success:
            ErrorFormatter.print_success(f"{args.step} successful!")
            print(result.message)
            print(f"Build time: {result.build_time:.2f}s")
            sys.exit(0)
        else:
            ErrorFormatter.print_error(f"{args.step} failed!", result.message)
            sys.exit(1)

    except BuildConfigurationError as e:
        ErrorFormatter.handle_configuration_error(e)
    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except PermissionError as e:
        ErrorFormatter.handle_permission_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def tasks_command(args: StepArgs) -> None:
    """List the declared steps of the workspace, grouped by group tag."""
    try:
        _workspace, graph = load_graph(args)
    except BuildConfigurationError as e:
        ErrorFormatter.handle_configuration_error(e)
        return

    project = args.project
    if project and not project.startswith(":"):
        project = ":" + project

    groups = {}
    for step in graph:
        if project and (step.name.rsplit(":", 1)[0] or ":") != project:
            continue
        groups.setdefault(step.group or "other", []).append(step)

    for group, steps in groups.items():
        print(f"{group.capitalize()} tasks")
        print("-" * (len(group) + 6))
        for step in steps:
            print(f"{step.name} - {step.description}")
        print()
    sys.exit(0)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "workspace_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Workspace directory (default: current directory)",
    )
    parser.add_argument(
        "-p",
        "--project",
        default=None,
        help="Project path such as ':core' (default: all projects)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )


def main() -> None:
    """asbuild - ActionScript build orchestration."""
    parser = argparse.ArgumentParser(
        prog="asbuild",
        description="asbuild - compile ActionScript projects into SWC and SWF files",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"asbuild {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    help_texts = {
        "build": "Build the configured SWC and/or SWF",
        "compile-archive": "Compile sources into build/libs/library.swc",
        "compile-executable": "Compile the main class into build/libs/executable.swf",
        "enumerate-classes": "Write build/tmp/classes.xml listing every class",
        "extract-executable": "Extract the SWF from the compiled SWC",
        "clean": "Delete the build directory",
        "generate-ide-descriptor": "Write IntelliJ IDEA module files",
    }
    for step in STEP_NAMES:
        step_parser = subparsers.add_parser(step, help=help_texts[step])
        _add_common_arguments(step_parser)
        if step == "build":
            step_parser.add_argument(
                "-c",
                "--clean",
                action="store_true",
                help="Clean build artifacts before building",
            )

    tasks_parser = subparsers.add_parser("tasks", help="List declared steps")
    _add_common_arguments(tasks_parser)

    # Parse arguments
    parsed_args = parser.parse_args()

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    PathValidator.validate_workspace_dir(parsed_args.workspace_dir)
    setup_logging(parsed_args.verbose)

    args = StepArgs(
        step=parsed_args.command,
        workspace_dir=parsed_args.workspace_dir,
        project=parsed_args.project,
        clean=getattr(parsed_args, "clean", False),
        verbose=parsed_args.verbose,
    )

    if parsed_args.command == "tasks":
        tasks_command(args)
    else:
        step_command(args)


if __name__ == "__main__":
    main()
