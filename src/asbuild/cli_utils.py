"""CLI utility functions for asbuild.

This module provides common utilities used across CLI commands including:
- Logging setup
- Step target selection
- Error handling and formatting
- Path validation
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from asbuild.config import Workspace, qualify_step_name
from asbuild.errors import BuildConfigurationError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger for CLI use.

    Args:
        verbose: Log DEBUG messages instead of INFO and above
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger()
    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)


class TargetSelector:
    """Maps a CLI command to qualified step names."""

    @staticmethod
    def select_targets(workspace: Workspace, step: str, project: Optional[str] = None) -> List[str]:
        """Select the steps to run for a command.

        Args:
            workspace: Loaded workspace
            step: Unqualified step name (e.g. "build")
            project: Optional project path (e.g. ":core"); all projects otherwise

        Returns:
            Qualified step names in project declaration order

        Raises:
            WorkspaceError: If the project is not part of the workspace
        """
        if project:
            if not project.startswith(":"):
                project = ":" + project
            return [qualify_step_name(workspace.get_project(project).path, step)]
        return [qualify_step_name(path, step) for path in workspace.projects]


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
            title: Error title (e.g., "Configuration error", "Build failed")
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
    def handle_configuration_error(error: BuildConfigurationError) -> None:
        """Handle configuration errors raised while declaring the step graph."""
        ErrorFormatter.print_error("Configuration error", str(error))
        sys.exit(1)

    @staticmethod
    def handle_file_not_found(error: FileNotFoundError) -> None:
        ErrorFormatter.print_error("Error: File not found", str(error))
        print("Make sure you're in an asbuild workspace with an asbuild.ini file.")
        sys.exit(1)

    @staticmethod
    def handle_permission_error(error: PermissionError) -> None:
        ErrorFormatter.print_error("Error: Permission denied", str(error))
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Build interrupted")
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
    """Validates workspace paths."""

    @staticmethod
    def validate_workspace_dir(workspace_dir: Path) -> None:
        """Validate that the workspace directory exists and is a directory.

        Raises:
            SystemExit: If path doesn't exist or isn't a directory
        """
        if not workspace_dir.exists():
            print(f"{ErrorFormatter.RED}✗ Error: Path does not exist: {workspace_dir}{ErrorFormatter.RESET}")
            sys.exit(2)
        if not workspace_dir.is_dir():
            print(f"{ErrorFormatter.RED}✗ Error: Path is not a directory: {workspace_dir}{ErrorFormatter.RESET}")
            sys.exit(2)
