"""
Step execution for asbuild.

Runs the requested steps and their predecessors in dependency order:
1. Build the execution plan from the task graph
2. Skip steps whose declared outputs are newer than their declared inputs
3. Run the remaining step actions one at a time
4. Stop at the first failure; nothing after it runs

A failed step's output files are deleted, so an artifact is either fully
produced or absent.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from ..errors import StepExecutionError
from .steps import BuildStep, TaskGraph


@dataclass
class BuildResult:
    """Result of running a set of steps."""

    success: bool
    executed: List[str] = field(default_factory=list)
    up_to_date: List[str] = field(default_factory=list)
    failed_step: Optional[str] = None
    build_time: float = 0.0
    message: str = ""


class StepRunner:
    """
    Executes steps of a TaskGraph.

    Example usage:
        runner = StepRunner(graph)
        result = runner.run([":build"])
        if not result.success:
            print(result.message)
    """

    def __init__(self, graph: TaskGraph, show_progress: bool = True, verbose: bool = False):
        """
        Initialize step runner.

        Args:
            graph: Fully declared task graph
            show_progress: Print one line per step
            verbose: Print step descriptions
        """
        self.graph = graph
        self.show_progress = show_progress
        self.verbose = verbose

    def run(self, targets: Iterable[str]) -> BuildResult:
        """
        Run the target steps and everything they depend on.

        Args:
            targets: Qualified step names

        Returns:
            BuildResult describing executed, skipped and failed steps

        Raises:
            UnknownStepError: If a target is not declared
            CyclicDependencyError: If the steps cannot be ordered
        """
        start_time = time.time()
        plan = self.graph.execution_plan(targets)
        result = BuildResult(success=True)

        for index, step in enumerate(plan, start=1):
            if is_up_to_date(step):
                result.up_to_date.append(step.name)
                self._report(index, len(plan), step, "UP-TO-DATE")
                continue

            self._report(index, len(plan), step)
            try:
                self.execute(step)
            except StepExecutionError as e:
                logging.error(str(e))
                discard_outputs(step)
                result.success = False
                result.failed_step = step.name
                result.message = str(e)
                break
            result.executed.append(step.name)

        result.build_time = time.time() - start_time
        if result.success:
            result.message = f"{len(result.executed)} executed, {len(result.up_to_date)} up-to-date"
        return result

    def execute(self, step: BuildStep) -> None:
        """
        Run a single step's action.

        Raises:
            StepExecutionError: Wrapping any exception raised by the action
        """
        if step.action is None:
            return
        try:
            step.action()
        except KeyboardInterrupt:
            raise
        except Exception as e:
            raise StepExecutionError(step.name, e) from e

    def _report(self, index: int, total: int, step: BuildStep, status: str = "") -> None:
        if not self.show_progress:
            return
        line = f"[{index}/{total}] {step.name}"
        if status:
            line += f" {status}"
        print(line)
        if self.verbose and step.description:
            print(f"      {step.description}")


def discard_outputs(step: BuildStep) -> None:
    """Delete the file outputs of a failed step so the next run rebuilds them."""
    for output in step.outputs:
        if output.is_file():
            output.unlink()
            logging.warning(f"Removed incomplete output {output}")


def is_up_to_date(step: BuildStep) -> bool:
    """
    Check whether a step can be skipped.

    A step is up to date when it declares outputs, all of them exist, and no
    declared input is newer than the oldest output. Steps without outputs
    always run.
    """
    if not step.has_outputs():
        return False

    output_times = []
    for output in step.outputs:
        if not output.exists():
            return False
        output_times.append(output.stat().st_mtime)

    newest_input = newest_mtime(step.inputs)
    if newest_input is None:
        return True
    return newest_input <= min(output_times)


def newest_mtime(paths: Iterable[Path]) -> Optional[float]:
    """
    Newest modification time among paths, walking directories recursively.

    Missing inputs count as infinitely new so the step runs and reports them.
    """
    newest: Optional[float] = None
    for path in paths:
        if not path.exists():
            return float("inf")
        candidates = [path]
        if path.is_dir():
            candidates.extend(path.rglob("*"))
        for candidate in candidates:
            mtime = candidate.stat().st_mtime
            if newest is None or mtime > newest:
                newest = mtime
    return newest
