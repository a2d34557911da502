"""Compiler Executor.

This module runs the SDK compilers as subprocesses.

Design:
    - Blocks until the compiler exits; there is no timeout and no retry
    - Compiler output is echoed unmodified, it is the user-facing diagnostic
    - A non-zero exit status raises CompilerError
    - On Ctrl+C the whole compiler process tree is terminated
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from ..errors import CompilerError
from ..process_utils import handle_keyboard_interrupt_properly, terminate_process_tree


class CompilerExecutor:
    """Executes compiler command lines."""

    def __init__(self, show_progress: bool = True, verbose: bool = False):
        """Initialize compiler executor.

        Args:
            show_progress: Whether to echo compiler output
            verbose: Whether to print the full command line
        """
        self.show_progress = show_progress
        self.verbose = verbose

    def run(self, cmd: List[str], cwd: Optional[Path] = None, description: str = "compiler") -> str:
        """Run a compiler command to completion.

        Args:
            cmd: Full command line (executable first)
            cwd: Working directory for the process
            description: Name used in messages (e.g. "compc")

        Returns:
            Combined stdout/stderr output of the process

        Raises:
            CompilerError: If the executable is missing or exits non-zero
        """
        logging.debug(f"Running {description}: {' '.join(cmd)}")
        if self.verbose:
            print(" ".join(cmd))

        try:
            proc = subprocess.Popen(
                cmd,
                cwd=str(cwd) if cwd else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except FileNotFoundError as e:
            raise CompilerError(f"Failed to start {description}: {e}") from e

        try:
            output, _ = proc.communicate()
        except KeyboardInterrupt as ke:
            terminate_process_tree(proc.pid)
            handle_keyboard_interrupt_properly(ke)

        output = output or ""
        if self.show_progress and output:
            print(output, end="" if output.endswith("\n") else "\n")

        if proc.returncode != 0:
            raise CompilerError(
                f"{description} failed with exit code {proc.returncode}",
                returncode=proc.returncode,
                output=output,
            )

        return output
