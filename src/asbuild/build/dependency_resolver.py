"""Dependency Resolver.

This module turns bundled/external dependency declarations into the SWC
files a compile step consumes.

Design:
    - ProjectRef entries add a hard predecessor edge to the producing
      project's compile-archive step and yield that step's outputs
    - FileSetRef entries yield their files and add no edge
    - Any other entry kind is a configuration error
    - Results are computed fresh for each consuming step
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List

from ..config.project_config import DependencyEntry, FileSetRef, ProjectRef
from ..errors import UnknownStepError, UnsupportedDependencyError, WorkspaceError
from .steps import StepBuilder, TaskGraph


class DependencyResolver:
    """Resolves dependency entries against a task graph."""

    def __init__(self, graph: TaskGraph):
        """Initialize dependency resolver.

        Args:
            graph: Task graph holding the already declared producer steps
        """
        self.graph = graph

    def resolve(self, consumer: StepBuilder, entries: Iterable[DependencyEntry]) -> List[Path]:
        """Resolve a dependency partition for a consuming step.

        Args:
            consumer: Builder of the step that will consume the files
            entries: Bundled or external dependency entries

        Returns:
            Ordered, de-duplicated list of resolved file locations

        Raises:
            WorkspaceError: If a referenced project has no compile-archive step
            UnsupportedDependencyError: For unknown entry kinds
        """
        resolved: Dict[Path, None] = {}
        for entry in entries:
            for path in self.resolve_entry(consumer, entry):
                resolved[path] = None
        return list(resolved)

    def resolve_entry(self, consumer: StepBuilder, entry: DependencyEntry) -> List[Path]:
        if isinstance(entry, ProjectRef):
            try:
                producer = self.graph.get(entry.step_name)
            except UnknownStepError:
                raise WorkspaceError(
                    f"'{consumer.name}' depends on project '{entry.project_path}', "
                    + "which is not declared in the workspace"
                ) from None

            consumer.depends_on(producer)
            logging.debug(f"{consumer.name} depends on {producer.name}")
            return list(producer.outputs)

        if isinstance(entry, FileSetRef):
            return list(entry.paths)

        raise UnsupportedDependencyError(
            f"Unsupported dependency type: {type(entry).__name__}"
        )
